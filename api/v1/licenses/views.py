"""
License API views.

These endpoints are used by the licensing back office and by end-user
products to:
- Issue, upgrade and list license keys
- Activate a license key with its secret
- Check an owner's license for a product
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1 import dependencies
from api.v1.licenses.serializers import (
    ActivateLicenseRequestSerializer,
    ActivationResultSerializer,
    IssueLicenseRequestSerializer,
    IssueLicenseResponseSerializer,
    LicenseCheckSerializer,
    LicenseKeySummarySerializer,
    UpgradeLicenseRequestSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.upgrade_license import UpgradeLicenseCommand
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.application.queries.list_licenses import ListLicensesQuery

tracer = get_tracer(__name__)


def validation_failed(span, errors) -> Response:
    """Record a serializer failure on the span and build the 400 response."""
    span.set_attribute("error", "validation_failed")
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response(
        {"error": {"code": "VALIDATION_ERROR", "message": errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )


class IssueLicenseView(APIView):
    """View for issuing license keys."""

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License Key",
        description=(
            "Issue an inactive license key for an owner and product. "
            "The raw license secret is returned once and never stored."
        ),
        tags=["Licenses"],
        request=IssueLicenseRequestSerializer,
        responses={
            201: IssueLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Account, product or feature not found"},
            409: {"description": "Owner already holds a license for this product"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license key."""
        return async_to_sync(self._handle_issue_license)(request)

    async def _handle_issue_license(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("operation", "issue_license")

            serializer = IssueLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_failed(span, serializer.errors)

            data = serializer.validated_data
            span.set_attribute("username", data["username"])
            span.set_attribute("product.id", str(data["product_id"]))
            span.set_attribute("license.package_tier", data["package_tier"])
            span.set_attribute("license.mode", data["license_mode"])

            command = IssueLicenseCommand(
                username=data["username"],
                product_id=data["product_id"],
                package_tier=data["package_tier"],
                license_mode=data["license_mode"],
                issued_duration=data["issued_duration"],
                allowed_features=serializer.grant_requests(),
            )
            result = await dependencies.issue_license_handler().handle(command)

            span.set_attribute("license_key.id", str(result.license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                IssueLicenseResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )


class ActivateLicenseView(APIView):
    """View for activating license keys."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License Key",
        description=(
            "Activate the owner's license key for a product by presenting the raw "
            "license secret. Annual keys start their expiry clock on activation."
        ),
        tags=["Licenses"],
        request=ActivateLicenseRequestSerializer,
        responses={
            200: ActivationResultSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "License key does not match"},
            403: {"description": "License expired or suspended"},
            404: {"description": "Account, product or license not found"},
            409: {"description": "License already active"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license key."""
        return async_to_sync(self._handle_activate_license)(request)

    async def _handle_activate_license(self, request: Request) -> Response:
        """Async handler for activate license."""
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("operation", "activate_license")

            serializer = ActivateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_failed(span, serializer.errors)

            data = serializer.validated_data
            span.set_attribute("username", data["username"])
            span.set_attribute("product.name", data["product_name"])

            command = ActivateLicenseCommand(
                username=data["username"],
                product_name=data["product_name"],
                license_secret=data["license_key"],
            )
            result = await dependencies.activate_license_handler().handle(command)

            span.set_attribute("license_key.id", str(result.license_key_id))
            span.set_status(Status(StatusCode.OK))
            return Response(ActivationResultSerializer(result).data, status=status.HTTP_200_OK)


class UpgradeLicenseView(APIView):
    """View for upgrading license keys."""

    @extend_schema(
        operation_id="upgrade_license",
        summary="Upgrade License Key",
        description=(
            "Change a license key's package tier and mode and add duration. "
            "Expired or inactive keys are reset and must be activated again."
        ),
        tags=["Licenses"],
        request=UpgradeLicenseRequestSerializer,
        responses={
            200: LicenseKeySummarySerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License or feature not found"},
            409: {"description": "License was modified concurrently"},
        },
    )
    def put(self, request: Request, license_key_id) -> Response:
        """Upgrade a license key."""
        return async_to_sync(self._handle_upgrade_license)(request, license_key_id)

    async def _handle_upgrade_license(self, request: Request, license_key_id) -> Response:
        """Async handler for upgrade license."""
        with tracer.start_as_current_span("upgrade_license") as span:
            span.set_attribute("operation", "upgrade_license")
            span.set_attribute("license_key.id", str(license_key_id))

            serializer = UpgradeLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_failed(span, serializer.errors)

            data = serializer.validated_data
            command = UpgradeLicenseCommand(
                license_key_id=license_key_id,
                package_tier=data["package_tier"],
                license_mode=data["license_mode"],
                added_duration=data["added_duration"],
                allowed_features=serializer.grant_requests(),
            )
            result = await dependencies.upgrade_license_handler().handle(command)

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseKeySummarySerializer(result).data, status=status.HTTP_200_OK)


class CheckLicenseView(APIView):
    """View for checking an owner's license."""

    @extend_schema(
        operation_id="check_license",
        summary="Check License",
        description=(
            "Return the current status of the owner's license for a product. "
            "Annual keys past their expiry are reported as expired."
        ),
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="product_name",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Name of the licensed product",
            ),
        ],
        responses={
            200: LicenseCheckSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Stored license secret does not match"},
            404: {"description": "Account, product or license not found"},
        },
    )
    def get(self, request: Request, username: str) -> Response:
        """Check a license."""
        return async_to_sync(self._handle_check_license)(request, username)

    async def _handle_check_license(self, request: Request, username: str) -> Response:
        """Async handler for check license."""
        with tracer.start_as_current_span("check_license") as span:
            span.set_attribute("operation", "check_license")
            span.set_attribute("username", username)

            product_name = request.query_params.get("product_name", "")
            span.set_attribute("product.name", product_name)

            query = CheckLicenseQuery(username=username, product_name=product_name)
            result = await dependencies.check_license_handler().handle(query)

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseCheckSerializer(result).data, status=status.HTTP_200_OK)


class ListLicensesView(APIView):
    """View for listing license keys."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List License Keys",
        description="List every license key with its current status and feature grants.",
        tags=["Licenses"],
        responses={200: LicenseKeySummarySerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List license keys."""
        return async_to_sync(self._handle_list_licenses)(request)

    async def _handle_list_licenses(self, request: Request) -> Response:
        """Async handler for list licenses."""
        with tracer.start_as_current_span("list_licenses") as span:
            span.set_attribute("operation", "list_licenses")

            result = await dependencies.list_licenses_handler().handle(ListLicensesQuery())

            span.set_attribute("license.count", len(result))
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseKeySummarySerializer(result, many=True).data, status=status.HTTP_200_OK
            )
