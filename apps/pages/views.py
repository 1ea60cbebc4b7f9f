from django.shortcuts import render

from apps.bookings.forms import SlotSelectionForm
from apps.doctors.models import Doctor
from apps.patients.models import Patient


def home(request):
    """Landing page: doctor list and slot picker that starts a booking."""
    doctors = Doctor.objects.active().order_by('code')
    patients = Patient.objects.active().order_by('code')
    return render(request, 'index.html', {
        'doctors': doctors,
        'patients': patients,
        'form': SlotSelectionForm(),
    })


def error_404(request, exception):
    return render(request, '404.html', status=404)


def error_500(request):
    return render(request, '500.html', status=500)
