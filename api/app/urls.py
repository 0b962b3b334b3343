from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from app.errors import error_response
from brand.views import WorkspaceBrandView
from library.views import CaseViewSet, FAQItemViewSet
from proposals.views import BlockDetailView, BlockDuplicateView, BlockTypesView, ProposalViewSet
from publishing.views import PublicSnapshotView
from workspaces.views import WorkspaceViewSet


def healthz(_request):
    return HttpResponse('ok')


@api_view(['GET'])
@permission_classes([AllowAny])
def api_health(_request):
    """Lightweight liveness probe (no DB)."""
    return Response({'status': 'ok'})


@api_view(['GET'])
@permission_classes([AllowAny])
def api_ready(_request):
    """Readiness probe: checks DB and cache connectivity.

    Returns shape:
    {"status":"ok|error","db":bool,"cache":bool,"details":{...}}
    """
    from django.core.cache import cache
    from django.db import DatabaseError, connections

    db_ok = False
    cache_ok = False
    details = {}
    try:
        with connections['default'].cursor() as cur:  # type: ignore[index]
            cur.execute('SELECT 1')
            cur.fetchone()
        db_ok = True
    except DatabaseError as exc:
        details['db_error'] = str(exc)[:200]
    try:
        cache.set('ready_probe', '1', 5)
        cache_ok = cache.get('ready_probe') == '1'
    except Exception as exc:  # cache backends raise their own client errors
        details['cache_error'] = str(exc)[:200]
    status = 'ok' if db_ok else 'error'
    payload = {'status': status, 'db': db_ok, 'cache': cache_ok, 'details': details}
    if status == 'error':
        return error_response('ready_check_failed', 'One or more readiness checks failed', status=503, meta=payload)
    return Response(payload)


router = DefaultRouter()
router.register(r'workspaces', WorkspaceViewSet, basename='workspace')
router.register(r'proposals', ProposalViewSet, basename='proposal')
router.register(r'cases', CaseViewSet, basename='case')
router.register(r'faq', FAQItemViewSet, basename='faq')

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz', healthz),
    path('api/health', api_health),
    path('api/ready', api_ready),
    path('api/token', TokenObtainPairView.as_view()),
    path('api/token/refresh', TokenRefreshView.as_view()),
    path('api/block-types', BlockTypesView.as_view()),
    path('api/blocks/<str:block_id>', BlockDetailView.as_view()),
    path('api/blocks/<str:block_id>/duplicate', BlockDuplicateView.as_view()),
    path('api/workspaces/<uuid:workspace_id>/brand', WorkspaceBrandView.as_view()),
    path('api/p/<slug:slug>', PublicSnapshotView.as_view()),
    path('api/', include(router.urls)),
]
