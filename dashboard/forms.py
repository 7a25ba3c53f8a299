from django import forms

from blog.forms import split_list

FEATURED_TYPES = [
    ('video', "YouTube video"),
    ('text', "Text"),
    ('customCode', "Custom HTML"),
]


class PanelForm(forms.Form):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs['class'] = 'form-select' if isinstance(field.widget, forms.Select) else 'form-control'


class HomeSettingsForm(PanelForm):
    featured_type = forms.ChoiceField(choices=FEATURED_TYPES)
    youtube_url = forms.URLField(required=False)
    text_title = forms.CharField(required=False, max_length=200)
    text_content = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 5}))
    custom_html = forms.CharField(required=False, strip=False, widget=forms.Textarea(attrs={'rows': 8}))

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('featured_type') == 'video' and not cleaned_data.get('youtube_url'):
            self.add_error('youtube_url', "A YouTube URL is required for the video type.")
        return cleaned_data

    @classmethod
    def initial_from(cls, settings_data):
        featured = settings_data.get('featuredContent') or {}
        return {
            'featured_type': featured.get('type', 'text'),
            'youtube_url': featured.get('youtubeUrl', ''),
            'text_title': featured.get('textTitle', ''),
            'text_content': featured.get('textContent', ''),
            'custom_html': featured.get('customHtml', ''),
        }

    def to_document(self, current=None):
        data = self.cleaned_data
        document = dict(current or {})
        document['featuredContent'] = {
            'type': data['featured_type'],
            'youtubeUrl': data['youtube_url'],
            'textTitle': data['text_title'],
            'textContent': data['text_content'],
            'customHtml': data['custom_html'],
        }
        return document


class SeoSettingsForm(PanelForm):
    site_title = forms.CharField(max_length=200)
    site_description = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}))
    site_keywords = forms.CharField(required=False, help_text="Comma separated.")
    canonical_url = forms.URLField(required=False)
    robots = forms.CharField(required=False, max_length=100)
    favicon = forms.CharField(required=False, max_length=500)

    og_title = forms.CharField(required=False, max_length=200)
    og_description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    og_image = forms.CharField(required=False, max_length=500)
    og_type = forms.CharField(required=False, max_length=50)
    og_url = forms.URLField(required=False)
    og_site_name = forms.CharField(required=False, max_length=200)

    twitter_card = forms.CharField(required=False, max_length=50)
    twitter_site = forms.CharField(required=False, max_length=100)
    twitter_creator = forms.CharField(required=False, max_length=100)
    twitter_title = forms.CharField(required=False, max_length=200)
    twitter_description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    twitter_image = forms.CharField(required=False, max_length=500)

    robots_txt = forms.CharField(
        required=False, strip=False, widget=forms.Textarea(attrs={'rows': 6}),
        help_text="Leave empty to serve the generated robots.txt.",
    )

    OG_FIELDS = ('title', 'description', 'image', 'type', 'url', 'site_name')
    TWITTER_FIELDS = ('card', 'site', 'creator', 'title', 'description', 'image')

    @classmethod
    def initial_from(cls, seo, robots_txt=''):
        og = seo.get('og') or {}
        twitter = seo.get('twitter') or {}
        keywords = seo.get('siteKeywords') or []
        initial = {
            'site_title': seo.get('siteTitle', ''),
            'site_description': seo.get('siteDescription', ''),
            'site_keywords': ', '.join(keywords) if isinstance(keywords, list) else str(keywords),
            'canonical_url': seo.get('canonicalUrl', ''),
            'robots': seo.get('robots', ''),
            'favicon': seo.get('favicon', ''),
            'robots_txt': robots_txt,
        }
        initial.update({f'og_{name}': og.get(name, '') for name in cls.OG_FIELDS})
        initial.update({f'twitter_{name}': twitter.get(name, '') for name in cls.TWITTER_FIELDS})
        return initial

    def to_document(self):
        data = self.cleaned_data
        return {
            'siteTitle': data['site_title'],
            'siteDescription': data['site_description'],
            'siteKeywords': split_list(data['site_keywords']),
            'canonicalUrl': data['canonical_url'],
            'robots': data['robots'],
            'favicon': data['favicon'],
            'og': {name: data[f'og_{name}'] for name in self.OG_FIELDS},
            'twitter': {name: data[f'twitter_{name}'] for name in self.TWITTER_FIELDS},
        }
