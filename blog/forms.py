from django import forms

from content.forms import slug_validator
from content.store import as_datetime


def split_list(value):
    return [item.strip() for item in (value or '').split(',') if item.strip()]


class BlogPostForm(forms.Form):
    title = forms.CharField(max_length=200, error_messages={'required': "Title cannot be empty."})
    slug = forms.CharField(
        required=False, validators=[slug_validator],
        help_text="Leave empty to build it from the title.",
    )
    date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date'}))
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))
    thumbnail = forms.CharField(required=False, max_length=500)
    author = forms.CharField(required=False, max_length=100)
    category = forms.CharField(required=False, max_length=100)
    tags = forms.CharField(required=False, help_text="Comma separated.")
    content = forms.CharField(required=False, strip=False, widget=forms.Textarea(attrs={'rows': 18}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs['class'] = 'form-control'

    @classmethod
    def initial_from(cls, post):
        when = as_datetime(post.get('date'))
        tags = post.get('tags') or []
        return {
            'title': post.get('title', ''),
            'slug': post.get('slug', ''),
            'date': when.date() if when else None,
            'description': post.get('description', ''),
            'thumbnail': post.get('thumbnail', ''),
            'author': post.get('author', ''),
            'category': post.get('category', ''),
            'tags': ', '.join(tags) if isinstance(tags, list) else str(tags),
            'content': post.get('content', ''),
        }

    def to_document(self):
        data = self.cleaned_data
        return {
            'title': data['title'],
            'date': data['date'].isoformat(),
            'description': data['description'],
            'thumbnail': data['thumbnail'],
            'author': data['author'],
            'category': data['category'],
            'tags': split_list(data['tags']),
        }
