from django.contrib.sitemaps import Sitemap
from django.urls import reverse

from content import store
from content.store import as_datetime


class StaticViewSitemap(Sitemap):
    changefreq = "monthly"

    PRIORITIES = {"home": 1.0, "about_me:about_me": 0.8, "projects:project_list": 0.9,
                  "blog:post_list": 0.9, "contact:contact": 0.5}

    def items(self):
        return list(self.PRIORITIES)

    def location(self, item):
        return reverse(item)

    def priority(self, item):
        return self.PRIORITIES[item]


class ContentSitemap(Sitemap):
    changefreq = "weekly"
    priority = 0.7
    content_type = None
    url_name = None

    def items(self):
        return store.get_sorted(self.content_type)

    def location(self, item):
        return reverse(self.url_name, args=[item["slug"]])

    def lastmod(self, item):
        return as_datetime(item.get("date"))


class ProjectSitemap(ContentSitemap):
    content_type = "projects"
    url_name = "projects:project_detail"


class BlogSitemap(ContentSitemap):
    content_type = "blog"
    url_name = "blog:post_detail"


sitemaps = {
    "static": StaticViewSitemap,
    "projects": ProjectSitemap,
    "blog": BlogSitemap,
}
