"""Forms validating the JSON payloads of the resolution endpoints.

The API speaks camelCase JSON; :meth:`from_payload` maps those keys onto
the snake_case form fields so the usual Django validation machinery can be
reused for request bodies.
"""

from __future__ import annotations

from typing import Any, Mapping

from django import forms

from .engine.markup import host_fragment


class TitleListField(forms.Field):
    """A JSON list of title strings.

    Anything that is not a list cleans to ``None`` so the form can report a
    single "required" message for missing and malformed values alike.
    """

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault('required', False)
        super().__init__(**kwargs)

    def to_python(self, value: Any) -> list[str] | None:
        if not isinstance(value, (list, tuple)):
            return None
        if not all(isinstance(item, str) for item in value):
            raise forms.ValidationError('titles must be a list of strings', code='invalid_titles')
        return list(value)


class PayloadForm(forms.Form):
    """Base form built from a decoded JSON body."""

    payload_keys: dict[str, str] = {}
    required_message = ''

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'PayloadForm':
        data = {field: payload.get(key) for key, field in cls.payload_keys.items()}
        return cls(data)

    def first_error(self) -> str:
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return self.required_message


class ExtractLinksForm(PayloadForm):
    """Markup mode: a shared root page URL and the titles to resolve."""

    payload_keys = {'rootUrl': 'root_url', 'titles': 'titles'}
    required_message = 'rootUrl and titles are required'

    root_url = forms.CharField(required=False)
    titles = TitleListField()

    def clean(self) -> dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        if self.errors:
            return cleaned_data
        root_url = cleaned_data.get('root_url')
        if not root_url or cleaned_data.get('titles') is None:
            raise forms.ValidationError(self.required_message)
        host = host_fragment(root_url)
        if not host:
            raise forms.ValidationError('Invalid Notion URL format')
        cleaned_data['host'] = host
        return cleaned_data


class NotionSearchForm(PayloadForm):
    """Search mode: an integration token, an optional root id and titles."""

    payload_keys = {'token': 'token', 'rootId': 'root_id', 'titles': 'titles'}
    required_message = 'token and titles are required'

    token = forms.CharField(required=False)
    root_id = forms.CharField(required=False)
    titles = TitleListField()

    def clean(self) -> dict[str, Any]:  # type: ignore[override]
        cleaned_data = super().clean()
        if self.errors:
            return cleaned_data
        if not cleaned_data.get('token') or cleaned_data.get('titles') is None:
            raise forms.ValidationError(self.required_message)
        return cleaned_data
