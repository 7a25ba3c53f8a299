import logging
from email.utils import formataddr

from django.conf import settings
from django.contrib import messages
from django.core.mail import EmailMultiAlternatives
from django.core.paginator import Paginator
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.html import strip_tags
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from accounts.permissions import admin_api, admin_required
from content.api import json_error, load_json_body
from content.forms import form_error_message
from dashboard.notify import notify_dashboard

from .forms import ContactForm, ReplyForm
from .models import Message, Reply
from .throttle import client_ip, hit_rate_limit
from .turnstile import TurnstileConfigError, verify_token

logger = logging.getLogger(__name__)

MESSAGES_PER_PAGE = 20


def save_message(data):
    message = Message.objects.create(
        name=data['name'],
        email=data['email'],
        subject=data['subject'],
        message=data['message'],
    )
    logger.info("New contact message #%s from %s", message.id, message.email)
    notify_dashboard("new_message", message.to_dict())
    return message


def send_reply(user, to, subject, html, message=None):
    from_email = settings.DEFAULT_FROM_EMAIL
    if settings.EMAIL_FROM_NAME:
        from_email = formataddr((settings.EMAIL_FROM_NAME, from_email))

    email = EmailMultiAlternatives(subject, strip_tags(html), from_email, [to])
    email.attach_alternative(html, "text/html")
    email.send()

    reply = Reply.objects.create(message=message, to=to, subject=subject, body=html, sent_by=user)
    if message is not None and not message.is_read:
        message.is_read = True
        message.save(update_fields=['is_read'])
    logger.info("Reply sent to %s by %s", to, user)
    return reply


def contact_view(request):
    form = ContactForm(request.POST or None)
    if request.method == 'POST':
        if hit_rate_limit(request):
            messages.error(request, "⛔ Too many messages. Please try again later.")
            return render(request, 'contact/contact.html', {'form': form}, status=429)

        token = request.POST.get('cf-turnstile-response', '')
        if not token:
            form.add_error(None, "Verification token is missing. Please reload the page and try again.")
        elif form.is_valid():
            try:
                verified = verify_token(token, client_ip(request))
            except TurnstileConfigError as exc:
                logger.error("Contact form is misconfigured: %s", exc)
                verified = False
            if verified:
                save_message(form.cleaned_data)
                messages.success(request, "✅ Your message has been sent. Thank you!")
                return redirect('contact:contact')
            form.add_error(None, "Bot verification failed. Please try again.")

    return render(request, 'contact/contact.html', {'form': form})


@csrf_exempt
@require_POST
def contact_api(request):
    if hit_rate_limit(request):
        return json_error("Too many messages. Please try again later.", 429)

    body = load_json_body(request)
    if body is None:
        return json_error("The request body is malformed or empty.", 400)

    token = body.get('turnstileToken')
    if not token:
        return json_error("Verification token is missing. Please reload the page and try again.", 400)
    try:
        verified = verify_token(token, client_ip(request))
    except TurnstileConfigError as exc:
        return json_error("Server configuration error.", 500, exc)
    if not verified:
        return json_error("Bot verification failed. Are you sure you are human?", 401)

    form = ContactForm(body)
    if not form.is_valid():
        return json_error(f"All fields are required. {form_error_message(form)}", 400)

    save_message(form.cleaned_data)
    return JsonResponse({"success": True, "message": "Your message has been delivered."})


@csrf_exempt
@require_POST
def verify_turnstile_api(request):
    body = load_json_body(request) or {}
    token = body.get('token')
    if not token:
        return JsonResponse({"success": False, "error": "Token is required."}, status=400)
    try:
        verified = verify_token(token, client_ip(request))
    except TurnstileConfigError as exc:
        logger.error("Turnstile is misconfigured: %s", exc)
        return JsonResponse({"success": False, "error": "Server configuration error."}, status=500)
    if not verified:
        return JsonResponse({"success": False, "error": "Verification failed."}, status=400)
    return JsonResponse({"success": True})


@admin_api
@require_POST
def reply_api(request):
    body = load_json_body(request)
    if body is None:
        return json_error("The request body is malformed or empty.", 400)

    form = ReplyForm(body)
    if not form.is_valid():
        return json_error(f"Validation error: {form_error_message(form)}", 400)

    message = None
    if form.cleaned_data['messageId']:
        message = Message.objects.filter(pk=form.cleaned_data['messageId']).first()
        if message is None:
            return json_error("Message not found.", 404)

    try:
        send_reply(request.user, form.cleaned_data['to'], form.cleaned_data['subject'],
                   form.cleaned_data['html'], message)
    except OSError as exc:
        return json_error("A server error occurred while sending the e-mail.", 500, exc)
    return JsonResponse({"success": True, "message": "E-mail sent successfully."})


@admin_required
def message_list(request):
    inbox = Message.objects.all()
    status = request.GET.get('status', '')
    if status == 'unread':
        inbox = inbox.filter(is_read=False)
    elif status == 'read':
        inbox = inbox.filter(is_read=True)

    paginator = Paginator(inbox, MESSAGES_PER_PAGE)
    page_obj = paginator.get_page(request.GET.get('page'))
    return render(request, 'contact/message_list.html', {
        'inbox': page_obj,
        'status': status,
        'unread_count': Message.objects.filter(is_read=False).count(),
    })


@admin_required
def message_detail(request, pk):
    message = get_object_or_404(Message, pk=pk)
    if not message.is_read:
        message.is_read = True
        message.save(update_fields=['is_read'])

    form = ReplyForm(request.POST or None, initial={
        'messageId': message.pk,
        'to': message.email,
        'subject': f"Re: {message.subject}",
    })
    if request.method == 'POST' and form.is_valid():
        try:
            send_reply(request.user, form.cleaned_data['to'], form.cleaned_data['subject'],
                       form.cleaned_data['html'], message)
        except OSError as exc:
            logger.error("Reply to message #%s failed: %s", message.pk, exc)
            messages.error(request, "❌ The e-mail could not be sent.")
        else:
            messages.success(request, "✅ Your reply has been sent.")
            return redirect('contact:message_detail', pk=message.pk)

    return render(request, 'contact/message_detail.html', {
        'message': message,
        'form': form,
        'replies': message.replies.all(),
    })


@admin_required
@require_POST
def toggle_read(request, pk):
    message = get_object_or_404(Message, pk=pk)
    message.is_read = not message.is_read
    message.save(update_fields=['is_read'])
    return redirect('contact:message_list')


@admin_required
@require_POST
def delete_message(request, pk):
    message = get_object_or_404(Message, pk=pk)
    message.delete()
    messages.success(request, "🗑️ The message has been deleted.")
    return redirect('contact:message_list')
