# models.py
from django.db import models


class AboutMeQuerySet(models.QuerySet):
    def current(self):
        # The site has a single owner; the oldest record is the live one
        return self.order_by('id').first()


class AboutMe(models.Model):
    name = models.CharField(max_length=255)
    title = models.CharField(max_length=255, blank=True)
    sub_title = models.CharField(max_length=255, blank=True)
    header_title = models.CharField(max_length=255, blank=True)
    short_description = models.TextField(blank=True)
    content = models.TextField(blank=True)
    profile_image = models.CharField(max_length=500, blank=True)
    about_image = models.CharField(max_length=500, blank=True)
    email = models.EmailField(blank=True)
    linkedin = models.URLField(blank=True)
    github = models.URLField(blank=True)
    twitter = models.URLField(blank=True)
    website = models.URLField(blank=True)
    working_on = models.TextField(blank=True, help_text="One item per line.")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AboutMeQuerySet.as_manager()

    class Meta:
        verbose_name = "about me"
        verbose_name_plural = "about me"

    def __str__(self):
        return self.name

    @property
    def working_on_list(self):
        return [line.strip() for line in self.working_on.splitlines() if line.strip()]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "sub_title": self.sub_title,
            "header_title": self.header_title,
            "short_description": self.short_description,
            "content": self.content,
            "profile_image": self.profile_image,
            "about_image": self.about_image,
            "email": self.email,
            "social": {"linkedin": self.linkedin, "github": self.github, "twitter": self.twitter},
            "website": self.website,
            "working_on": self.working_on_list,
            "skills": [skill.to_dict() for skill in self.skills.all()],
            "experiences": [experience.to_dict() for experience in self.experiences.all()],
            "updated_at": self.updated_at,
        }


class Skill(models.Model):
    about = models.ForeignKey(AboutMe, on_delete=models.CASCADE, related_name='skills')
    name = models.CharField(max_length=100)
    icon = models.CharField(max_length=100, blank=True)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['order', 'id']

    def __str__(self):
        return self.name

    def to_dict(self):
        return {"id": self.id, "name": self.name, "icon": self.icon}


class Experience(models.Model):
    about = models.ForeignKey(AboutMe, on_delete=models.CASCADE, related_name='experiences')
    title = models.CharField(max_length=200)
    company = models.CharField(max_length=200)
    date = models.CharField(max_length=100, help_text="Free text, e.g. 2023 - Present")
    description = models.TextField()
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['order', 'id']

    def __str__(self):
        return f"{self.title} at {self.company}"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "date": self.date,
            "description": self.description,
        }
