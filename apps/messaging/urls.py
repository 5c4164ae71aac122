# apps/messaging/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('conversations/', views.InboxView.as_view(), name='chat-conversations'),
    path('messages/<int:user_id>/', views.ThreadView.as_view(), name='chat-messages'),
    path('job/<int:job_id>/conversations/', views.JobConversationsView.as_view(), name='chat-job-conversations'),
    path(
        'my-application-conversations/',
        views.ApplicationConversationsView.as_view(),
        name='chat-application-conversations',
    ),
    path('can-send-message/<int:user_id>/', views.CanSendView.as_view(), name='chat-can-send'),
]
