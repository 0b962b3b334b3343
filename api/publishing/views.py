from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from app.errors import result_response

from .pipeline import get_public_snapshot


class PublicSnapshotView(APIView):
    """Anonymous viewer: latest snapshot of an active public link."""

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'public_snapshot'

    def get(self, request: Request, slug: str):
        return result_response(get_public_snapshot(slug))
