from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.contrib.sitemaps.views import sitemap
from django.urls import include, path

from about_me import views as about_views
from blog import views as blog_views
from contact import views as contact_views
from content import views as content_views
from popups import views as popup_views

from .sitemaps import sitemaps

urlpatterns = [
    path('', blog_views.home, name='home'),
    path('about/', include('about_me.urls')),
    path('blog/', include('blog.urls')),
    path('projects/', include('projects.urls')),
    path('', include('contact.urls')),
    path('', include('history.urls')),

    # Admin panel
    path('panel/', include('dashboard.urls')),
    path('panel/', include('accounts.urls')),
    path('panel/popups/', include('popups.urls')),
    path('panel/gallery/', content_views.gallery, name='gallery'),
    path('django-admin/', admin.site.urls),

    # JSON API
    path('api/', include('content.urls')),
    path('api/about/', about_views.about_api, name='about_api'),
    path('api/admin/about/', about_views.update_about_api, name='update_about_api'),
    path('api/popups/', popup_views.popup_list_api, name='popup_list_api'),
    path('api/popups/<str:slug>/', popup_views.popup_detail_api, name='popup_detail_api'),
    path('api/contact/', contact_views.contact_api, name='contact_api'),
    path('api/verify-turnstile/', contact_views.verify_turnstile_api, name='verify_turnstile'),
    path('api/admin/reply/', contact_views.reply_api, name='reply_api'),

    path('sitemap.xml', sitemap, {'sitemaps': sitemaps}, name='django.contrib.sitemaps.views.sitemap'),
    path('robots.txt', content_views.robots_txt, name='robots_txt'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
