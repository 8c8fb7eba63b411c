from django.urls import path
from . import views

app_name = 'expenses'

urlpatterns = [
    # GET  /api/groups/{id}/balances/     - Net balances and suggested payments
    path('groups/<uuid:group_id>/balances/', views.group_balances, name='group-balances'),

    # GET  /api/groups/{id}/expenses/     - List expenses
    # POST /api/groups/{id}/expenses/     - Record expense (with split)
    path('groups/<uuid:group_id>/expenses/', views.group_expenses, name='group-expenses'),

    # GET  /api/groups/{id}/settlements/  - List settlements
    # POST /api/groups/{id}/settlements/  - Record settlement
    path('groups/<uuid:group_id>/settlements/', views.group_settlements, name='group-settlements'),

    # GET  /api/groups/{id}/activities/   - Group activity feed
    path('groups/<uuid:group_id>/activities/', views.group_activities, name='group-activities'),

    # GET  /api/activities/               - Activity feed across the user's groups
    path('activities/', views.activities, name='activities'),
]
