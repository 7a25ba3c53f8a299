# forms.py
from django import forms
from django.forms import inlineformset_factory

from .models import AboutMe, Skill, Experience


class AboutMeForm(forms.ModelForm):
    class Meta:
        model = AboutMe
        fields = [
            'name', 'title', 'sub_title', 'header_title', 'short_description', 'content',
            'profile_image', 'about_image', 'email', 'linkedin', 'github', 'twitter', 'website',
            'working_on',
        ]
        widgets = {
            'short_description': forms.Textarea(attrs={'rows': 4}),
            'content': forms.Textarea(attrs={'rows': 12}),
            'working_on': forms.Textarea(attrs={'rows': 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs['class'] = 'form-control'


SkillFormSet = inlineformset_factory(
    AboutMe, Skill, fields=['name', 'icon', 'order'], extra=1, can_delete=True
)
ExperienceFormSet = inlineformset_factory(
    AboutMe, Experience, fields=['title', 'company', 'date', 'description', 'order'], extra=1, can_delete=True,
    widgets={'description': forms.Textarea(attrs={'rows': 3})},
)


class SkillPayloadForm(forms.Form):
    id = forms.CharField()
    name = forms.CharField(max_length=100, error_messages={'required': "Skill name cannot be empty."})
    icon = forms.CharField(max_length=100, required=False)

    def clean_id(self):
        value = self.cleaned_data['id']
        # new_* ids come from rows added in the editor
        if not value.startswith('new_') and not value.isdigit():
            raise forms.ValidationError("Unknown skill id.")
        return value


class ExperiencePayloadForm(forms.Form):
    id = forms.CharField(required=False)
    title = forms.CharField(max_length=200, error_messages={'required': "Title cannot be empty."})
    company = forms.CharField(max_length=200, error_messages={'required': "Company cannot be empty."})
    date = forms.CharField(max_length=100, error_messages={'required': "Date range cannot be empty."})
    description = forms.CharField(error_messages={'required': "Description cannot be empty."})
