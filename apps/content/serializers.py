"""
Content serializers
"""
from rest_framework import serializers

from apps.accounts.models import User
from .models import BlogPost, Comment, CommentReply, Service, ServiceImage, Testimonial


class AuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name']


class CommentReplySerializer(serializers.ModelSerializer):
    user = AuthorSerializer(read_only=True)

    class Meta:
        model = CommentReply
        fields = ['id', 'content', 'user', 'created_at']


class CommentSerializer(serializers.ModelSerializer):
    user = AuthorSerializer(read_only=True)
    replies = CommentReplySerializer(many=True, read_only=True)
    blog_post_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'blog_post_id', 'content', 'status', 'user', 'replies', 'created_at', 'updated_at']


class BlogPostSummarySerializer(serializers.ModelSerializer):
    """List payload; the body is left out."""
    author = AuthorSerializer(read_only=True)

    class Meta:
        model = BlogPost
        fields = [
            'id', 'title', 'slug', 'excerpt', 'author', 'featured_image', 'status',
            'category', 'tags', 'published_at', 'created_at', 'updated_at',
        ]


class BlogPostSerializer(BlogPostSummarySerializer):
    comments = CommentSerializer(many=True, read_only=True)

    class Meta(BlogPostSummarySerializer.Meta):
        fields = BlogPostSummarySerializer.Meta.fields + ['content', 'comments']


class BlogPostWriteSerializer(serializers.Serializer):
    title = serializers.CharField(min_length=3, max_length=255)
    content = serializers.CharField(min_length=10)
    excerpt = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    featured_image = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=BlogPost.STATUS_CHOICES, required=False)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    tags = serializers.JSONField(required=False, allow_null=True)


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField(min_length=2, max_length=1000)


class CommentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Comment.STATUS_CHOICES)


class ServiceImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceImage
        fields = ['id', 'image_url', 'is_primary', 'sort_order']


class ServiceSerializer(serializers.ModelSerializer):
    images = ServiceImageSerializer(many=True, read_only=True)

    class Meta:
        model = Service
        fields = ['id', 'name', 'description', 'base_price', 'is_available', 'images', 'created_at', 'updated_at']


class ServiceWriteSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    description = serializers.CharField(min_length=10)
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    is_available = serializers.BooleanField(required=False, default=True)
    image_urls = serializers.ListField(child=serializers.CharField(max_length=500), required=False)


class TestimonialSerializer(serializers.ModelSerializer):
    user = AuthorSerializer(read_only=True)

    class Meta:
        model = Testimonial
        fields = ['id', 'content', 'rating', 'is_approved', 'user', 'created_at', 'updated_at']


class TestimonialCreateSerializer(serializers.Serializer):
    content = serializers.CharField(min_length=10, max_length=1000)
    rating = serializers.IntegerField(min_value=1, max_value=5)


class TestimonialApprovalSerializer(serializers.Serializer):
    is_approved = serializers.BooleanField()
