from django.contrib import admin
from .models import AboutMe, Skill, Experience


class SkillInline(admin.TabularInline):
    model = Skill
    extra = 0


class ExperienceInline(admin.StackedInline):
    model = Experience
    extra = 0


@admin.register(AboutMe)
class AboutMeAdmin(admin.ModelAdmin):
    list_display = ('name', 'title', 'email', 'created_at', 'updated_at')
    search_fields = ('name', 'email')
    inlines = [SkillInline, ExperienceInline]
