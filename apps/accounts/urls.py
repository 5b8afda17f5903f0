from django.urls import path

from . import views

app_name = 'accounts'

urlpatterns = [
    path('me/', views.current_user, name='current_user'),
    path('pacte/teachers/', views.pacte_teachers, name='pacte_teachers'),
    path('pacte/teachers/<int:teacher_id>/', views.pacte_teacher, name='pacte_teacher'),
    path('pacte/teachers/<int:teacher_id>/history/', views.pacte_history, name='pacte_history'),
]
