"""
API Views for blog, services and testimonials
"""
import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from api.permissions import IsAdminRole
from api.responses import success_response
from . import services
from .serializers import (
    BlogPostSerializer,
    BlogPostSummarySerializer,
    BlogPostWriteSerializer,
    CommentCreateSerializer,
    CommentReplySerializer,
    CommentSerializer,
    CommentStatusSerializer,
    ServiceSerializer,
    ServiceWriteSerializer,
    TestimonialApprovalSerializer,
    TestimonialCreateSerializer,
    TestimonialSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# BLOG
# =============================================================================

class BlogPostListView(APIView):
    """
    Published posts, newest first.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[OpenApiParameter('category', str), OpenApiParameter('search', str)],
        responses={200: BlogPostSummarySerializer(many=True)},
    )
    def get(self, request):
        rows, pagination = services.list_published_posts(request.query_params)
        return success_response(BlogPostSummarySerializer(rows, many=True).data, pagination=pagination)


class BlogCategoryListView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return success_response(services.list_blog_categories())


class BlogPostDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: BlogPostSerializer})
    def get(self, request, slug):
        return success_response(BlogPostSerializer(services.get_published_post(slug)).data)


class BlogCommentCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CommentCreateSerializer, responses={201: CommentSerializer})
    def post(self, request, post_id):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.create_comment(request.user, post_id, serializer.validated_data['content'])
        return success_response(
            CommentSerializer(comment).data,
            message='Comment submitted and awaiting approval',
            status=status.HTTP_201_CREATED,
        )


class AdminBlogPostListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(
        parameters=[OpenApiParameter('status', str), OpenApiParameter('search', str)],
        responses={200: BlogPostSerializer(many=True)},
    )
    def get(self, request):
        rows, pagination = services.list_all_posts(request.query_params)
        return success_response(BlogPostSerializer(rows, many=True).data, pagination=pagination)

    @extend_schema(request=BlogPostWriteSerializer, responses={201: BlogPostSerializer})
    def post(self, request):
        serializer = BlogPostWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = services.create_post(request.user, serializer.validated_data)
        return success_response(BlogPostSerializer(post).data, status=status.HTTP_201_CREATED)


class AdminBlogPostDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=BlogPostWriteSerializer, responses={200: BlogPostSerializer})
    def put(self, request, post_id):
        serializer = BlogPostWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        post = services.update_post(post_id, serializer.validated_data)
        return success_response(BlogPostSerializer(post).data)

    def delete(self, request, post_id):
        services.delete_post(post_id)
        return success_response(message='Blog post deleted successfully')


class AdminCommentStatusView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=CommentStatusSerializer, responses={200: CommentSerializer})
    def put(self, request, comment_id):
        serializer = CommentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.moderate_comment(comment_id, serializer.validated_data['status'])
        return success_response(CommentSerializer(comment).data)


class AdminCommentReplyView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=CommentCreateSerializer, responses={201: CommentReplySerializer})
    def post(self, request, comment_id):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reply = services.reply_to_comment(request.user, comment_id, serializer.validated_data['content'])
        return success_response(CommentReplySerializer(reply).data, status=status.HTTP_201_CREATED)


# =============================================================================
# SERVICES
# =============================================================================

class ServiceListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ServiceSerializer(many=True)})
    def get(self, request):
        return success_response(ServiceSerializer(services.list_available_services(), many=True).data)


class ServiceDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ServiceSerializer})
    def get(self, request, service_id):
        return success_response(ServiceSerializer(services.get_service(service_id)).data)


class AdminServiceListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=ServiceWriteSerializer, responses={201: ServiceSerializer})
    def post(self, request):
        serializer = ServiceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = services.create_service(serializer.validated_data)
        return success_response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)


class AdminServiceDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=ServiceWriteSerializer, responses={200: ServiceSerializer})
    def put(self, request, service_id):
        serializer = ServiceWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        service = services.update_service(service_id, serializer.validated_data)
        return success_response(ServiceSerializer(service).data)

    def delete(self, request, service_id):
        services.delete_service(service_id)
        return success_response(message='Service deleted successfully')


# =============================================================================
# TESTIMONIALS
# =============================================================================

class TestimonialListView(APIView):
    """
    GET is public (approved only); POST submits the caller's testimonial.
    """
    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(responses={200: TestimonialSerializer(many=True)})
    def get(self, request):
        rows, pagination = services.list_approved_testimonials(request.query_params)
        return success_response(TestimonialSerializer(rows, many=True).data, pagination=pagination)

    @extend_schema(request=TestimonialCreateSerializer, responses={201: TestimonialSerializer})
    def post(self, request):
        serializer = TestimonialCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        testimonial = services.submit_testimonial(
            request.user,
            serializer.validated_data['content'],
            serializer.validated_data['rating'],
        )
        return success_response(
            TestimonialSerializer(testimonial).data,
            message='Testimonial submitted and awaiting approval',
            status=status.HTTP_201_CREATED,
        )


class AdminTestimonialListView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(parameters=[OpenApiParameter('is_approved', bool)], responses={200: TestimonialSerializer(many=True)})
    def get(self, request):
        rows, pagination = services.list_all_testimonials(request.query_params)
        return success_response(TestimonialSerializer(rows, many=True).data, pagination=pagination)


class AdminTestimonialDetailView(APIView):
    permission_classes = [IsAdminRole]

    @extend_schema(request=TestimonialApprovalSerializer, responses={200: TestimonialSerializer})
    def put(self, request, testimonial_id):
        serializer = TestimonialApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        testimonial = services.set_testimonial_approval(
            testimonial_id, serializer.validated_data['is_approved']
        )
        return success_response(TestimonialSerializer(testimonial).data)

    def delete(self, request, testimonial_id):
        services.delete_testimonial(testimonial_id)
        return success_response(message='Testimonial deleted successfully')
