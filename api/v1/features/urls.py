"""
URL configuration for feature API endpoints.
"""

from django.urls import path

from api.v1.features import views

urlpatterns = [
    path(
        "features/<uuid:feature_id>/usage",
        views.RecordFeatureUsageView.as_view(),
        name="record-feature-usage",
    ),
    path(
        "features/<uuid:feature_id>/restore",
        views.RestoreFeatureView.as_view(),
        name="restore-feature",
    ),
]
