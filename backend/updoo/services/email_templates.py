from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jinja2 import Template

from updoo.models.enums import Language


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def _pair(subject: str, body: str) -> tuple[Template, Template, Template]:
    return (
        Template(subject),
        Template(body, autoescape=True),
        Template(body),
    )


class EmailTemplates:
    def __init__(self) -> None:
        self.templates: dict[tuple[str, Language], tuple[Template, Template, Template]] = {
            ("listing-approved", Language.POLISH): _pair(
                "Twoje ogłoszenie „{{ title }}” zostało opublikowane",
                """
Dzień dobry{% if name %} {{ name }}{% endif %},

Twoje ogłoszenie „{{ title }}” zostało zatwierdzone i jest już widoczne dla freelancerów.
Zgłoszenia przyjmujemy do {{ deadline }}.

Zobacz ogłoszenie: {{ listing_url }}

Zespół Updoo
                """.strip(),
            ),
            ("listing-approved", Language.ENGLISH): _pair(
                "Your listing \"{{ title }}\" is now live",
                """
Hello{% if name %} {{ name }}{% endif %},

Your listing "{{ title }}" has been approved and is now visible to freelancers.
Offers are collected until {{ deadline }}.

View the listing: {{ listing_url }}

The Updoo team
                """.strip(),
            ),
            ("listing-rejected", Language.POLISH): _pair(
                "Twoje ogłoszenie „{{ title }}” wymaga poprawek",
                """
Dzień dobry{% if name %} {{ name }}{% endif %},

Nie mogliśmy opublikować ogłoszenia „{{ title }}”.
Powód: {{ reason }}

Możesz je poprawić tutaj: {{ edit_url }}

Zespół Updoo
                """.strip(),
            ),
            ("listing-rejected", Language.ENGLISH): _pair(
                "Your listing \"{{ title }}\" needs changes",
                """
Hello{% if name %} {{ name }}{% endif %},

We could not publish your listing "{{ title }}".
Reason: {{ reason }}

You can update it here: {{ edit_url }}

The Updoo team
                """.strip(),
            ),
            ("followed-category-listing", Language.POLISH): _pair(
                "Nowe ogłoszenie w kategorii {{ category }}",
                """
Dzień dobry{% if name %} {{ name }}{% endif %},

W obserwowanej kategorii {{ category }} pojawiło się nowe ogłoszenie: „{{ title }}”.
{% if rate %}Stawka: {{ rate }} {{ currency }}
{% endif %}
Zobacz szczegóły: {{ listing_url }}

Zespół Updoo
                """.strip(),
            ),
            ("followed-category-listing", Language.ENGLISH): _pair(
                "New listing in {{ category }}",
                """
Hello{% if name %} {{ name }}{% endif %},

A new listing was published in {{ category }}, a category you follow: "{{ title }}".
{% if rate %}Rate: {{ rate }} {{ currency }}
{% endif %}
See the details: {{ listing_url }}

The Updoo team
                """.strip(),
            ),
            ("new-application", Language.POLISH): _pair(
                "Nowe zgłoszenie do ogłoszenia „{{ title }}”",
                """
Dzień dobry{% if name %} {{ name }}{% endif %},

{{ applicant }} zgłosił(a) się do Twojego ogłoszenia „{{ title }}”.
{% if message %}
Wiadomość:
{{ message }}
{% endif %}
Zgłoszenia: {{ listing_url }}

Zespół Updoo
                """.strip(),
            ),
            ("new-application", Language.ENGLISH): _pair(
                "New application for \"{{ title }}\"",
                """
Hello{% if name %} {{ name }}{% endif %},

{{ applicant }} applied to your listing "{{ title }}".
{% if message %}
Message:
{{ message }}
{% endif %}
Applications: {{ listing_url }}

The Updoo team
                """.strip(),
            ),
            ("proposal-invitation", Language.POLISH): _pair(
                "Przygotowaliśmy dla Ciebie ogłoszenie: {{ offer_title }}",
                """
Dzień dobry,

Przygotowaliśmy szkic ogłoszenia „{{ offer_title }}” w serwisie Updoo.
Aby je opublikować, kliknij: {{ accept_url }}
Jeśli nie jesteś zainteresowany(a): {{ reject_url }}

Zespół Updoo
                """.strip(),
            ),
            ("proposal-invitation", Language.ENGLISH): _pair(
                "We prepared a listing for you: {{ offer_title }}",
                """
Hello,

We prepared a draft listing "{{ offer_title }}" on Updoo.
To publish it, open: {{ accept_url }}
Not interested? {{ reject_url }}

The Updoo team
                """.strip(),
            ),
            ("proposal-credentials", Language.POLISH): _pair(
                "Twoje konto w Updoo",
                """
Dzień dobry,

Utworzyliśmy dla Ciebie konto klienta.
Login: {{ email }}
Hasło tymczasowe: {{ password }}

Zaloguj się i zmień hasło: {{ login_url }}

Zespół Updoo
                """.strip(),
            ),
            ("proposal-credentials", Language.ENGLISH): _pair(
                "Your Updoo account",
                """
Hello,

We created a client account for you.
Login: {{ email }}
Temporary password: {{ password }}

Sign in and change your password: {{ login_url }}

The Updoo team
                """.strip(),
            ),
        }

    def render(self, name: str, language: Language, context: dict[str, Any]) -> RenderedEmail:
        templates = self.templates.get((name, language)) or self.templates.get((name, Language.POLISH))
        if templates is None:
            raise KeyError(f"Unknown email template: {name}")
        subject, html, text = templates
        html_body = html.render(**context).replace("\n", "<br>\n")
        return RenderedEmail(
            subject=subject.render(**context).strip(),
            html=f"<html><body>{html_body}</body></html>",
            text=text.render(**context),
        )
