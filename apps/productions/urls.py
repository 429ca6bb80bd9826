from django.urls import path

from apps.productions import views

app_name = "productions"

urlpatterns = [
    path("", views.DashboardView.as_view(), name="dashboard"),
    path("schedule/", views.OperatorScheduleView.as_view(), name="schedule"),
    path("schedule/print/", views.PrintScheduleView.as_view(), name="print_schedule"),
    path("productions/new/", views.CreateProductionView.as_view(), name="create"),
    path("productions/<int:pk>/", views.ProductionDetailView.as_view(), name="detail"),
    path("productions/<int:pk>/transition/", views.TransitionView.as_view(), name="transition"),
    path("productions/<int:pk>/delete/", views.DeleteRequestView.as_view(), name="delete"),
    path("productions/<int:pk>/notes/", views.SaveNotesView.as_view(), name="save_notes"),
    path("productions/<int:pk>/crew/", views.AssignCrewView.as_view(), name="assign_crew"),
    path("productions/<int:pk>/message/", views.MessageView.as_view(), name="message"),
    path("assignments/<int:pk>/respond/", views.RespondAssignmentView.as_view(), name="respond"),
]
