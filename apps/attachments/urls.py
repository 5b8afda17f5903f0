from django.urls import path

from . import views

app_name = 'attachments'

urlpatterns = [
    path('sessions/<int:session_id>/attachments/', views.session_attachments, name='session_attachments'),
    path('attachments/<int:attachment_id>/', views.attachment_detail, name='attachment_detail'),
    path('attachments/<int:attachment_id>/download/', views.attachment_download, name='attachment_download'),
    path('attachments/<int:attachment_id>/verify/', views.attachment_verify, name='attachment_verify'),
    path('attachments/<int:attachment_id>/archive/', views.attachment_archive, name='attachment_archive'),
]
