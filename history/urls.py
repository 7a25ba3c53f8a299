from django.urls import path

from . import views

app_name = 'history'

urlpatterns = [
    path('panel/history/', views.history_page, name='history'),
    path('api/admin/git/log/', views.log_api, name='log'),
    path('api/admin/git/commit-all/', views.commit_all_api, name='commit_all'),
    path('api/admin/git/revert/', views.revert_api, name='revert'),
    path('api/admin/git/analyze-changes/', views.analyze_changes_api, name='analyze_changes'),
    path('api/admin/git/branches/', views.branches_api, name='branches'),
    path('api/admin/git/switch-branch/', views.switch_branch_api, name='switch_branch'),
    path('api/admin/git/test-connection/', views.test_connection_api, name='test_connection'),
]
