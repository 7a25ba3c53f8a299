from django.contrib import admin

from .models import Message, Reply


class ReplyInline(admin.TabularInline):
    model = Reply
    extra = 0
    readonly_fields = ('to', 'subject', 'sent_by', 'sent_at')


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('subject', 'name', 'email', 'created_at', 'is_read')
    list_filter = ('is_read',)
    search_fields = ('name', 'email', 'subject', 'message')
    inlines = [ReplyInline]


@admin.register(Reply)
class ReplyAdmin(admin.ModelAdmin):
    list_display = ('subject', 'to', 'sent_by', 'sent_at')
    search_fields = ('to', 'subject')
