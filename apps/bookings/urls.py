"""
Booking flow URLs.

Flow:
  /book/select/              POST: doctor + date + slot from the landing page
  /book/review/              Review the appointment, optional patient intake
  /book/review/calendar/     Download the draft appointment as .ics
  /book/summary/             Summary: pay (demo), visit type, share, print
  /book/summary/calendar/    Download the booked appointment as .ics
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('select/',            views.select_slot,      name='select_slot'),
    path('review/',            views.review,           name='review'),
    path('review/calendar/',   views.review_calendar,  name='review_calendar'),
    path('summary/',           views.summary,          name='summary'),
    path('summary/calendar/',  views.summary_calendar, name='summary_calendar'),
]
