"""
Content services: blog and comments, floral services, testimonials
"""
import logging
from typing import Any, Dict, List, Tuple

from django.db import transaction
from django.db.models import Prefetch, Q
from django.utils import timezone

from apps.catalog.services import replace_images
from apps.core.exceptions import InvalidOperationException, NotFoundException
from apps.core.pagination import paginate
from apps.core.utils import build_excerpt, generate_slug, normalize_tags
from .models import BlogPost, Comment, CommentReply, Service, ServiceImage, Testimonial

logger = logging.getLogger(__name__)


# =============================================================================
# BLOG
# =============================================================================

def _comments_prefetch(approved_only: bool) -> Prefetch:
    comments = Comment.objects.select_related('user').prefetch_related(
        Prefetch('replies', queryset=CommentReply.objects.select_related('user'))
    )
    if approved_only:
        comments = comments.filter(status=Comment.STATUS_APPROVED)
    return Prefetch('comments', queryset=comments)


def _search(queryset, term):
    if term:
        queryset = queryset.filter(Q(title__icontains=term) | Q(content__icontains=term))
    return queryset


def list_published_posts(query_params) -> Tuple[List[BlogPost], Dict]:
    queryset = BlogPost.objects.select_related('author').filter(status=BlogPost.STATUS_PUBLISHED)
    category = query_params.get('category')
    if category:
        queryset = queryset.filter(category=category)
    queryset = _search(queryset, query_params.get('search'))
    return paginate(queryset.order_by('-published_at'), query_params)


def list_blog_categories() -> List[str]:
    categories = (
        BlogPost.objects.filter(status=BlogPost.STATUS_PUBLISHED)
        .exclude(category__isnull=True)
        .exclude(category='')
        .values_list('category', flat=True)
        .distinct()
        .order_by('category')
    )
    return list(categories)


def get_published_post(slug: str) -> BlogPost:
    post = (
        BlogPost.objects.select_related('author')
        .prefetch_related(_comments_prefetch(approved_only=True))
        .filter(slug=slug, status=BlogPost.STATUS_PUBLISHED)
        .first()
    )
    if post is None:
        raise NotFoundException('Blog post not found', entity='blog_post')
    return post


def create_comment(user, post_id, content: str) -> Comment:
    post = BlogPost.objects.filter(pk=post_id).first()
    if post is None:
        raise NotFoundException('Blog post not found', entity='blog_post')
    comment = Comment.objects.create(
        blog_post=post, user=user, content=content, status=Comment.STATUS_PENDING
    )
    logger.info(f"Comment {comment.id} awaiting moderation on post {post.id}")
    return comment


def list_all_posts(query_params) -> Tuple[List[BlogPost], Dict]:
    queryset = BlogPost.objects.select_related('author').prefetch_related(
        _comments_prefetch(approved_only=False)
    )
    status = query_params.get('status')
    if status:
        queryset = queryset.filter(status=status)
    queryset = _search(queryset, query_params.get('search'))
    return paginate(queryset.order_by('-created_at'), query_params)


def _get_post(post_id) -> BlogPost:
    post = BlogPost.objects.select_related('author').filter(pk=post_id).first()
    if post is None:
        raise NotFoundException('Blog post not found', entity='blog_post')
    return post


def create_post(author, data: Dict[str, Any]) -> BlogPost:
    status = data.get('status') or BlogPost.STATUS_DRAFT
    post = BlogPost.objects.create(
        title=data['title'],
        slug=generate_slug(data['title']),
        content=data['content'],
        excerpt=data.get('excerpt') or build_excerpt(data['content']),
        author=author,
        featured_image=data.get('featured_image'),
        status=status,
        category=data.get('category'),
        tags=normalize_tags(data.get('tags')),
        published_at=timezone.now() if status == BlogPost.STATUS_PUBLISHED else None,
    )
    logger.info(f"Blog post {post.id} created ({post.status})")
    return post


@transaction.atomic
def update_post(post_id, data: Dict[str, Any]) -> BlogPost:
    post = _get_post(post_id)

    title = data.get('title')
    if title and title != post.title:
        post.title = title
        post.slug = generate_slug(title)

    status = data.get('status')
    if status == BlogPost.STATUS_PUBLISHED and post.status != BlogPost.STATUS_PUBLISHED:
        post.published_at = timezone.now()
    if status:
        post.status = status

    for field in ('content', 'excerpt', 'category', 'featured_image'):
        if data.get(field):
            setattr(post, field, data[field])
    if data.get('tags'):
        post.tags = normalize_tags(data['tags'])

    post.save()
    return post


def delete_post(post_id) -> None:
    post = _get_post(post_id)
    post.delete()
    logger.info(f"Blog post {post_id} deleted")


def moderate_comment(comment_id, status: str) -> Comment:
    comment = Comment.objects.select_related('user').filter(pk=comment_id).first()
    if comment is None:
        raise NotFoundException('Comment not found', entity='comment')
    comment.status = status
    comment.save(update_fields=['status', 'updated_at'])
    return comment


def reply_to_comment(user, comment_id, content: str) -> CommentReply:
    comment = Comment.objects.filter(pk=comment_id).first()
    if comment is None:
        raise NotFoundException('Comment not found', entity='comment')
    return CommentReply.objects.create(comment=comment, user=user, content=content)


# =============================================================================
# SERVICES
# =============================================================================

def _service_queryset():
    return Service.objects.prefetch_related('images')


def list_available_services() -> List[Service]:
    return list(_service_queryset().filter(is_available=True).order_by('base_price', 'name'))


def get_service(service_id) -> Service:
    service = _service_queryset().filter(pk=service_id).first()
    if service is None:
        raise NotFoundException('Service not found', entity='service')
    return service


@transaction.atomic
def create_service(data: Dict[str, Any]) -> Service:
    service = Service.objects.create(
        name=data['name'],
        description=data['description'],
        base_price=data.get('base_price'),
        is_available=data.get('is_available', True),
    )
    if data.get('image_urls'):
        replace_images('service', service, ServiceImage, data['image_urls'])
    return get_service(service.id)


@transaction.atomic
def update_service(service_id, data: Dict[str, Any]) -> Service:
    service = get_service(service_id)
    for field in ('name', 'description'):
        if data.get(field):
            setattr(service, field, data[field])
    for field in ('base_price', 'is_available'):
        if field in data and data[field] is not None:
            setattr(service, field, data[field])
    service.save()

    if data.get('image_urls') is not None:
        replace_images('service', service, ServiceImage, data['image_urls'])
    return get_service(service.id)


def delete_service(service_id) -> None:
    get_service(service_id).delete()
    logger.info(f"Service {service_id} deleted")


# =============================================================================
# TESTIMONIALS
# =============================================================================

def list_approved_testimonials(query_params) -> Tuple[List[Testimonial], Dict]:
    queryset = Testimonial.objects.select_related('user').filter(is_approved=True).order_by('-created_at')
    return paginate(queryset, query_params)


def submit_testimonial(user, content: str, rating: int) -> Testimonial:
    if Testimonial.objects.filter(user=user).exists():
        raise InvalidOperationException('You have already submitted a testimonial')
    return Testimonial.objects.create(user=user, content=content, rating=rating, is_approved=False)


def list_all_testimonials(query_params) -> Tuple[List[Testimonial], Dict]:
    queryset = Testimonial.objects.select_related('user').order_by('-created_at')
    is_approved = query_params.get('is_approved')
    if is_approved is not None and is_approved != '':
        queryset = queryset.filter(is_approved=is_approved == 'true')
    return paginate(queryset, query_params)


def _get_testimonial(testimonial_id) -> Testimonial:
    testimonial = Testimonial.objects.select_related('user').filter(pk=testimonial_id).first()
    if testimonial is None:
        raise NotFoundException('Testimonial not found', entity='testimonial')
    return testimonial


def set_testimonial_approval(testimonial_id, is_approved: bool) -> Testimonial:
    testimonial = _get_testimonial(testimonial_id)
    testimonial.is_approved = is_approved
    testimonial.save(update_fields=['is_approved', 'updated_at'])
    return testimonial


def delete_testimonial(testimonial_id) -> None:
    _get_testimonial(testimonial_id).delete()
