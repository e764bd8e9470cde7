"""
Feature API views.

Products call these endpoints to count feature usage against the owner's
license key, and operators call them to restore suspended features.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1 import dependencies
from api.v1.features.serializers import (
    FeatureOwnerRequestSerializer,
    FeatureRestoreResponseSerializer,
    FeatureUsageResponseSerializer,
)
from api.v1.licenses.views import validation_failed
from core.instrumentation import Status, StatusCode, get_tracer
from entitlements.application.commands.record_feature_usage import RecordFeatureUsageCommand
from entitlements.application.commands.restore_feature import RestoreFeatureCommand

tracer = get_tracer(__name__)


class RecordFeatureUsageView(APIView):
    """View for recording feature usage."""

    @extend_schema(
        operation_id="record_feature_usage",
        summary="Record Feature Usage",
        description=(
            "Count one use of a feature against the owner's license key. "
            "Exceeding the daily quota records a violation; a second violation "
            "within the escalation window suspends the feature."
        ),
        tags=["Features"],
        request=FeatureOwnerRequestSerializer,
        responses={
            200: FeatureUsageResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License not active or feature suspended"},
            404: {"description": "Account, feature or license not found"},
            409: {"description": "License was modified concurrently"},
            429: {"description": "Feature quota exceeded"},
        },
    )
    def post(self, request: Request, feature_id) -> Response:
        """Record a feature usage."""
        return async_to_sync(self._handle_record_usage)(request, feature_id)

    async def _handle_record_usage(self, request: Request, feature_id) -> Response:
        """Async handler for record feature usage."""
        with tracer.start_as_current_span("record_feature_usage") as span:
            span.set_attribute("operation", "record_feature_usage")
            span.set_attribute("feature.id", str(feature_id))

            serializer = FeatureOwnerRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_failed(span, serializer.errors)

            username = serializer.validated_data["username"]
            span.set_attribute("username", username)

            command = RecordFeatureUsageCommand(username=username, feature_id=feature_id)
            result = await dependencies.record_feature_usage_handler().handle(command)

            span.set_attribute("feature.outcome", result.outcome)
            span.set_status(Status(StatusCode.OK))
            return Response(FeatureUsageResponseSerializer(result).data, status=status.HTTP_200_OK)


class RestoreFeatureView(APIView):
    """View for restoring suspended features."""

    @extend_schema(
        operation_id="restore_feature",
        summary="Restore Feature",
        description=(
            "Move a suspended feature back into the owner's allowed features "
            "with fresh counters and its original limit."
        ),
        tags=["Features"],
        request=FeatureOwnerRequestSerializer,
        responses={
            200: FeatureRestoreResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Account, feature, license or disabled feature not found"},
            409: {"description": "Feature is already allowed"},
        },
    )
    def put(self, request: Request, feature_id) -> Response:
        """Restore a feature."""
        return async_to_sync(self._handle_restore_feature)(request, feature_id)

    async def _handle_restore_feature(self, request: Request, feature_id) -> Response:
        """Async handler for restore feature."""
        with tracer.start_as_current_span("restore_feature") as span:
            span.set_attribute("operation", "restore_feature")
            span.set_attribute("feature.id", str(feature_id))

            serializer = FeatureOwnerRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_failed(span, serializer.errors)

            username = serializer.validated_data["username"]
            span.set_attribute("username", username)

            command = RestoreFeatureCommand(username=username, feature_id=feature_id)
            result = await dependencies.restore_feature_handler().handle(command)

            span.set_attribute("license.status", result.license_status)
            span.set_status(Status(StatusCode.OK))
            return Response(
                FeatureRestoreResponseSerializer(result).data, status=status.HTTP_200_OK
            )
