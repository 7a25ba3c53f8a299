from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction

from about_me.models import AboutMe, Experience, Skill
from content import store

ABOUT = {
    'name': "Jane Doe",
    'title': "Software Developer",
    'sub_title': "I build web applications and internal tools.",
    'header_title': "Hi, I'm Jane",
    'short_description': "Backend-leaning developer who enjoys shipping small, sturdy services.",
    'content': "I work on web platforms, data pipelines and the tooling around them.",
    'profile_image': "/static/images/profile.webp",
    'email': "jane@example.com",
    'github': "https://github.com/example",
    'linkedin': "https://linkedin.com/in/example",
    'working_on': "Portfolio CMS\nBooking system for sports facilities",
}

SKILLS = [
    ("Python", "SiPython"),
    ("Django", "SiDjango"),
    ("PostgreSQL", "SiPostgresql"),
    ("Docker", "FaDocker"),
    ("TypeScript", "SiTypescript"),
]

EXPERIENCES = [
    {
        'title': "Software Developer",
        'company': "Example University",
        'date': "2024 - Present",
        'description': "Building and maintaining the facility booking platform.",
    },
    {
        'title': "Intern",
        'company': "Example University",
        'date': "2023 - 2024",
        'description': "Supported the IT department on internal web projects.",
    },
]

PROJECT = {
    'title': "Facility Booking",
    'date': date(2024, 1, 15).isoformat(),
    'description': "Online reservation and management for sports facilities.",
    'technologies': ["Python", "Django", "PostgreSQL"],
    'liveDemo': "https://example.com",
    'order': 1,
    'featured': True,
    'isLive': True,
}

POST = {
    'title': "Hello World",
    'date': date(2024, 2, 1).isoformat(),
    'description': "The first post on this site.",
    'author': "Jane Doe",
    'category': "General",
    'tags': ["news"],
}

TESTIMONIALS = [
    {'name': "John Smith", 'role': "Project Manager", 'text': "Reliable and quick to deliver."},
]


class Command(BaseCommand):
    help = "Seed the about page and sample content."

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset', action='store_true',
            help="Replace the existing about record and overwrite the sample files.",
        )

    def handle(self, *args, **options):
        reset = options['reset']
        self.seed_about(reset)
        self.seed_file('projects', 'facility-booking', PROJECT, "Details about the booking system.", reset)
        self.seed_file('blog', 'hello-world', POST, "Welcome to my blog.", reset)
        self.seed_file('testimonials', 'testimonials', TESTIMONIALS, '', reset)
        self.seed_file('home-settings', 'home-settings', store.DEFAULT_HOME_SETTINGS, '', reset)
        self.seed_file('seo-settings', 'seo-settings', store.DEFAULT_SEO_SETTINGS, '', reset)

    @transaction.atomic
    def seed_about(self, reset):
        if AboutMe.objects.exists():
            if not reset:
                self.stdout.write("ℹ️ About record already exists, skipping")
                return
            AboutMe.objects.all().delete()

        about = AboutMe.objects.create(**ABOUT)
        Skill.objects.bulk_create([
            Skill(about=about, name=name, icon=icon, order=position)
            for position, (name, icon) in enumerate(SKILLS)
        ])
        Experience.objects.bulk_create([
            Experience(about=about, order=position, **experience)
            for position, experience in enumerate(EXPERIENCES)
        ])
        self.stdout.write(self.style.SUCCESS(f"✅ About record for {about.name} created"))

    def seed_file(self, content_type, slug, data, content, reset):
        if store.get_full_path(content_type, slug).exists() and not reset:
            self.stdout.write(f"ℹ️ {content_type} '{slug}' already exists, skipping")
            return
        store.save_content(content_type, slug, data, content)
        self.stdout.write(self.style.SUCCESS(f"✅ {content_type} '{slug}' written"))
