from django import forms


class ContactForm(forms.Form):
    name = forms.CharField(max_length=100)
    email = forms.EmailField()
    subject = forms.CharField(max_length=200)
    message = forms.CharField(widget=forms.Textarea(attrs={'rows': 6}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs['class'] = 'form-control'


class ReplyForm(forms.Form):
    messageId = forms.IntegerField(required=False)
    to = forms.EmailField(error_messages={'invalid': "Invalid e-mail address."})
    subject = forms.CharField(max_length=200, error_messages={
        'required': "Subject cannot be empty.",
        'max_length': "Subject is too long.",
    })
    html = forms.CharField(error_messages={'required': "E-mail body cannot be empty."})
