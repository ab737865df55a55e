"""
URL configuration for seafood_orders project.
"""
from django.contrib import admin
from django.urls import path

from wholesale.api.views import graphql_view, report_csv_view

urlpatterns = [
    path('admin/', admin.site.urls),
    path('graphql/', graphql_view, name='graphql'),
    path('reports/monthly.csv', report_csv_view, name='monthly-report-csv'),
]
