from django.urls import path

from . import views

app_name = 'projects'

urlpatterns = [
    path('', views.project_list, name='project_list'),
    path('manage/', views.manage_projects, name='manage_projects'),
    path('new/', views.new_project, name='new_project'),
    path('<str:slug>/', views.project_detail, name='project_detail'),
    path('<str:slug>/edit/', views.edit_project, name='edit_project'),
    path('<str:slug>/delete/', views.delete_project, name='delete_project'),
]
