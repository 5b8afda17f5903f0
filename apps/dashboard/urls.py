from django.urls import path

from . import views
from . import views_export

app_name = 'dashboard'

urlpatterns = [
    path('settings/', views.system_settings, name='system_settings'),
    path('reports/summary/', views.report_summary, name='report_summary'),
    path('reports/teachers/', views.report_teachers, name='report_teachers'),
    path('reports/export/', views_export.export_sessions_excel, name='export_sessions_excel'),
]
