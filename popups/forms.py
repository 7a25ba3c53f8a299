from django import forms

from content.forms import POPUP_ACTION_TYPES, popup_errors, slug_validator


class PopupForm(forms.Form):
    title = forms.CharField(max_length=200, error_messages={'required': "Title cannot be empty."})
    slug = forms.CharField(
        required=False, validators=[slug_validator],
        help_text="Used in links as ?rp=<slug>. Leave empty to build it from the title.",
    )
    content = forms.CharField(
        required=False, strip=False, widget=forms.Textarea(attrs={'rows': 8}),
        help_text="HTML. Scripts are executed when the popup opens.",
    )
    image_url = forms.CharField(required=False, max_length=500)
    youtube_embed_url = forms.URLField(required=False, help_text="Shown instead of the image when set.")
    buttons = forms.JSONField(
        required=False, widget=forms.Textarea(attrs={'rows': 6}),
        help_text=f"List of {{text, actionType, actionValue}}; actionType is one of {', '.join(POPUP_ACTION_TYPES)}.",
    )
    is_active = forms.BooleanField(required=False, initial=True)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            if isinstance(field.widget, forms.CheckboxInput):
                field.widget.attrs['class'] = 'form-check-input'
            else:
                field.widget.attrs['class'] = 'form-control'

    @classmethod
    def initial_from(cls, popup):
        return {
            'title': popup.get('title', ''),
            'slug': popup.get('slug', ''),
            'content': popup.get('content', ''),
            'image_url': popup.get('imageUrl', ''),
            'youtube_embed_url': popup.get('youtubeEmbedUrl', ''),
            'buttons': popup.get('buttons') or [],
            'is_active': bool(popup.get('isActive')),
        }

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('buttons') is None:
            cleaned_data['buttons'] = []
        if not self.errors:
            for error in popup_errors(self.to_document()):
                field, _, message = error.partition(': ')
                self.add_error('buttons' if field.startswith('buttons') else None, f"{field}: {message}")
        return cleaned_data

    def to_document(self):
        data = self.cleaned_data
        return {
            'title': data['title'],
            'content': data['content'],
            'imageUrl': data['image_url'],
            'youtubeEmbedUrl': data['youtube_embed_url'],
            'buttons': data['buttons'],
            'isActive': data['is_active'],
        }
