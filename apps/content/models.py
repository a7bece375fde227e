"""
Content Models - Blog, Floral Services and Testimonials
Tables: BlogPosts, Comments, CommentReplies, Services, ServiceImages, Testimonials
"""
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from apps.core.models import BaseModel, CreatedModel


class BlogPost(BaseModel):
    STATUS_DRAFT = 'draft'
    STATUS_PUBLISHED = 'published'
    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_PUBLISHED, 'Published'),
        ('archived', 'Archived'),
    ]

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    content = models.TextField()
    excerpt = models.TextField(blank=True, null=True)
    author = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='blog_posts')
    featured_image = models.CharField(max_length=500, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    category = models.CharField(max_length=100, blank=True, null=True)
    tags = models.JSONField(blank=True, null=True)
    published_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'content_blog_posts'
        verbose_name = 'Blog Post'
        verbose_name_plural = 'Blog Posts'
        ordering = ['-published_at', '-created_at']

    def __str__(self):
        return self.title


class Comment(BaseModel):
    """
    Reader comment. Only approved comments are shown publicly.
    """
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        ('rejected', 'Rejected'),
    ]

    blog_post = models.ForeignKey(BlogPost, on_delete=models.CASCADE, related_name='comments')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='comments')
    content = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    class Meta:
        db_table = 'content_comments'
        ordering = ['created_at']

    def __str__(self):
        return f"Comment by {self.user_id} on {self.blog_post_id}"


class CommentReply(CreatedModel):
    comment = models.ForeignKey(Comment, on_delete=models.CASCADE, related_name='replies')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='comment_replies')
    content = models.TextField()

    class Meta:
        db_table = 'content_comment_replies'
        ordering = ['created_at']


class Service(BaseModel):
    """
    Floral service offered on request (event decoration, subscriptions...).
    """
    name = models.CharField(max_length=100)
    description = models.TextField()
    base_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    is_available = models.BooleanField(default=True)

    class Meta:
        db_table = 'content_services'
        verbose_name = 'Service'
        verbose_name_plural = 'Services'
        ordering = ['base_price', 'name']

    def __str__(self):
        return self.name


class ServiceImage(BaseModel):
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name='images')
    image_url = models.CharField(max_length=500)
    is_primary = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'content_service_images'
        ordering = ['sort_order', 'created_at']


class Testimonial(BaseModel):
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='testimonials')
    content = models.TextField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    is_approved = models.BooleanField(default=False)

    class Meta:
        db_table = 'content_testimonials'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.rating}/5 by {self.user_id}"
