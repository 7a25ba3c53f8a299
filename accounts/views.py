from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.views import LoginView
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.decorators.http import require_POST

from .permissions import is_admin


class CustomLoginView(LoginView):
    template_name = 'registration/login.html'
    redirect_authenticated_user = True  # already logged in -> straight to the panel

    def form_valid(self, form):
        # Only the site owner (or the Admin group) may use the panel
        if not is_admin(form.get_user()):
            messages.error(self.request, "⛔ This account has no access to the admin panel.")
            return self.form_invalid(form)
        return super().form_valid(form)

    def get_success_url(self):
        return self.get_redirect_url() or reverse_lazy('dashboard:home')


@require_POST
def logout_view(request):
    logout(request)
    messages.success(request, "✅ You have been logged out.")
    return redirect('login')
