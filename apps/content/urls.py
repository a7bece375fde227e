"""
Content URL Configuration
"""
from django.urls import path

from .views import (
    AdminBlogPostDetailView,
    AdminBlogPostListView,
    AdminCommentReplyView,
    AdminCommentStatusView,
    AdminServiceDetailView,
    AdminServiceListView,
    AdminTestimonialDetailView,
    AdminTestimonialListView,
    BlogCategoryListView,
    BlogCommentCreateView,
    BlogPostDetailView,
    BlogPostListView,
    ServiceDetailView,
    ServiceListView,
    TestimonialListView,
)

blog_urlpatterns = [
    path('', BlogPostListView.as_view(), name='blog-list'),
    path('categories/', BlogCategoryListView.as_view(), name='blog-categories'),
    path('admin/', AdminBlogPostListView.as_view(), name='admin-blog-list'),
    path('admin/<uuid:post_id>/', AdminBlogPostDetailView.as_view(), name='admin-blog-detail'),
    path('admin/comments/<uuid:comment_id>/', AdminCommentStatusView.as_view(), name='admin-comment-status'),
    path('admin/comments/<uuid:comment_id>/reply/', AdminCommentReplyView.as_view(), name='admin-comment-reply'),
    path('<uuid:post_id>/comments/', BlogCommentCreateView.as_view(), name='blog-comment-create'),
    path('<slug:slug>/', BlogPostDetailView.as_view(), name='blog-detail'),
]

service_urlpatterns = [
    path('', ServiceListView.as_view(), name='service-list'),
    path('admin/', AdminServiceListView.as_view(), name='admin-service-list'),
    path('admin/<uuid:service_id>/', AdminServiceDetailView.as_view(), name='admin-service-detail'),
    path('<uuid:service_id>/', ServiceDetailView.as_view(), name='service-detail'),
]

testimonial_urlpatterns = [
    path('', TestimonialListView.as_view(), name='testimonial-list'),
    path('admin/', AdminTestimonialListView.as_view(), name='admin-testimonial-list'),
    path('admin/<uuid:testimonial_id>/', AdminTestimonialDetailView.as_view(), name='admin-testimonial-detail'),
]
