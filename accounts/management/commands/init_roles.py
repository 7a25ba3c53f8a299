from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group, Permission
from django.core.management.base import BaseCommand, CommandError

from accounts.permissions import ADMIN_GROUP

# Models the owner edits through the panel
MANAGED_MODELS = ("aboutme", "skill", "experience", "message", "reply")


class Command(BaseCommand):
    help = "Create the Admin group and the site owner's account."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=settings.ADMIN_EMAIL)
        parser.add_argument("--password", default=settings.ADMIN_PASSWORD)

    def handle(self, *args, **options):
        # Create the Admin group if it doesn't exist yet
        admin_group, created = Group.objects.get_or_create(name=ADMIN_GROUP)
        perms = Permission.objects.filter(content_type__model__in=MANAGED_MODELS)
        admin_group.permissions.add(*perms)
        self.stdout.write(f"✅ Admin group {'created' if created else 'updated'} ({perms.count()} permissions)")

        email, password = options["email"], options["password"]
        if not email:
            return
        if not password:
            raise CommandError("ADMIN_PASSWORD (or --password) is required to create the admin user.")

        User = get_user_model()
        user, created = User.objects.get_or_create(username=email, defaults={"email": email})
        user.set_password(password)
        user.is_staff = True
        user.save()
        user.groups.add(admin_group)
        self.stdout.write(f"✅ Admin user {email} {'created' if created else 'updated'}")
