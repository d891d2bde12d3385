from __future__ import annotations

import logging
from typing import Any

import httpx
from sqlalchemy.orm import Session

from updoo.config import settings
from updoo.models.enums import Language, MailStatus
from updoo.models.mailer_log import MailerLog
from updoo.services.email_templates import EmailTemplates
from updoo.services.locale import display_name, slug_from_name
from updoo.services.mailer import MailerClient


logger = logging.getLogger(__name__)


def listing_url(listing, frontend_url: str | None = None) -> str:
    base = (frontend_url or settings.frontend_url).rstrip("/")
    return f"{base}/job/{slug_from_name(listing.title, 'oferta')}-{listing.id}"


class MailNotifier:
    """Renders and sends user-facing emails, recording every attempt in the mailer log.

    Provider errors are logged and recorded as FAILED rather than raised, so one
    bad address never stops a fan-out to the remaining recipients.
    """

    def __init__(
        self,
        db: Session,
        mailer: MailerClient | None = None,
        templates: EmailTemplates | None = None,
        frontend_url: str | None = None,
    ) -> None:
        self.db = db
        self.mailer = mailer or MailerClient()
        self.templates = templates or EmailTemplates()
        self.frontend_url = (frontend_url or settings.frontend_url).rstrip("/")

    def listing_approved(self, listing) -> MailStatus:
        author = listing.author
        return self._send(
            author.email,
            "listing-approved",
            Language(author.language),
            {
                "name": author.name,
                "title": listing.title,
                "deadline": listing.deadline.strftime("%Y-%m-%d %H:%M"),
                "listing_url": listing_url(listing, self.frontend_url),
            },
        )

    def listing_rejected(self, listing, reason: str) -> MailStatus:
        author = listing.author
        return self._send(
            author.email,
            "listing-rejected",
            Language(author.language),
            {
                "name": author.name,
                "title": listing.title,
                "reason": reason,
                "edit_url": f"{listing_url(listing, self.frontend_url)}/edit",
            },
        )

    def new_listing_in_followed_category(self, listing, users) -> list[MailStatus]:
        statuses = []
        for user in users:
            language = Language(user.language)
            statuses.append(
                self._send(
                    user.email,
                    "followed-category-listing",
                    language,
                    {
                        "name": user.name,
                        "title": listing.title,
                        "category": display_name(listing.category.names, language, fallback=listing.category.slug),
                        "rate": listing.rate,
                        "currency": listing.currency,
                        "listing_url": listing_url(listing, self.frontend_url),
                    },
                )
            )
        logger.info("Notified %s follower(s) about listing %s", len(statuses), listing.id)
        return statuses

    def new_application(self, listing, applicant, message: str | None) -> MailStatus:
        author = listing.author
        applicant_name = " ".join(part for part in (applicant.name, applicant.surname) if part) or applicant.email
        return self._send(
            author.email,
            "new-application",
            Language(author.language),
            {
                "name": author.name,
                "title": listing.title,
                "applicant": applicant_name,
                "message": message,
                "listing_url": listing_url(listing, self.frontend_url),
            },
        )

    def proposal_invitation(self, proposal, language: Language) -> MailStatus:
        offer_title = str(proposal.listing_data.get("title") or "").strip()
        if not offer_title:
            offer_title = "Oferta" if language == Language.POLISH else "Job"
        invitation_url = f"{self.frontend_url}/invitation?token={proposal.token}"
        return self._send(
            proposal.email,
            "proposal-invitation",
            language,
            {
                "offer_title": offer_title,
                "accept_url": invitation_url,
                "reject_url": f"{invitation_url}&reject=1",
            },
        )

    def proposal_credentials(self, email: str, password: str, language: Language) -> MailStatus:
        return self._send(
            email,
            "proposal-credentials",
            language,
            {"email": email, "password": password, "login_url": f"{self.frontend_url}/login"},
        )

    def _send(self, recipient: str, template: str, language: Language, context: dict[str, Any]) -> MailStatus:
        rendered = self.templates.render(template, language, context)
        entry = MailerLog(recipient=recipient, template=template, subject=rendered.subject)

        if not self.mailer.configured:
            logger.info("Mailer not configured, skipping %s email to %s", template, recipient)
            entry.status = MailStatus.SKIPPED
        else:
            try:
                entry.provider_message_id = self.mailer.send(recipient, rendered.subject, rendered.html, rendered.text)
                entry.status = MailStatus.SENT
            except httpx.HTTPError as exc:
                logger.warning("Sending %s email to %s failed: %s", template, recipient, exc)
                entry.status = MailStatus.FAILED
                entry.error = str(exc)

        status = entry.status
        self.db.add(entry)
        self.db.commit()
        return status
