from django import forms

from blog.forms import split_list
from content.forms import slug_validator
from content.store import as_datetime


class ProjectForm(forms.Form):
    title = forms.CharField(max_length=200, error_messages={'required': "Title cannot be empty."})
    slug = forms.CharField(
        required=False, validators=[slug_validator],
        help_text="Leave empty to build it from the title.",
    )
    date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date'}))
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))
    thumbnail = forms.CharField(required=False, max_length=500)
    main_image = forms.CharField(required=False, max_length=500)
    technologies = forms.CharField(required=False, help_text="Comma separated.")
    live_demo = forms.URLField(required=False)
    github_repo = forms.URLField(required=False)
    order = forms.IntegerField(required=False, min_value=0)
    featured = forms.BooleanField(required=False)
    is_live = forms.BooleanField(required=False)
    content = forms.CharField(required=False, strip=False, widget=forms.Textarea(attrs={'rows': 18}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            if isinstance(field.widget, forms.CheckboxInput):
                field.widget.attrs['class'] = 'form-check-input'
            else:
                field.widget.attrs['class'] = 'form-control'

    @classmethod
    def initial_from(cls, project):
        when = as_datetime(project.get('date'))
        technologies = project.get('technologies') or []
        return {
            'title': project.get('title', ''),
            'slug': project.get('slug', ''),
            'date': when.date() if when else None,
            'description': project.get('description', ''),
            'thumbnail': project.get('thumbnail', ''),
            'main_image': project.get('mainImage', ''),
            'technologies': ', '.join(technologies) if isinstance(technologies, list) else str(technologies),
            'live_demo': project.get('liveDemo', ''),
            'github_repo': project.get('githubRepo', ''),
            'order': project.get('order'),
            'featured': bool(project.get('featured')),
            'is_live': bool(project.get('isLive')),
            'content': project.get('content', ''),
        }

    def to_document(self):
        data = self.cleaned_data
        document = {
            'title': data['title'],
            'date': data['date'].isoformat(),
            'description': data['description'],
            'thumbnail': data['thumbnail'],
            'mainImage': data['main_image'],
            'technologies': split_list(data['technologies']),
            'liveDemo': data['live_demo'],
            'githubRepo': data['github_repo'],
            'featured': data['featured'],
            'isLive': data['is_live'],
        }
        # Without an order the project is sorted by date
        if data['order'] is not None:
            document['order'] = data['order']
        return document
