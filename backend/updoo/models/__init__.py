from updoo.models.application import Application
from updoo.models.engagement import CategoryFollow, Favorite
from updoo.models.listing import JobListing, listing_skills
from updoo.models.mailer_log import MailerLog
from updoo.models.proposal import Proposal
from updoo.models.reference import Category, Location, Skill
from updoo.models.user import User

__all__ = [
    "Application",
    "Category",
    "CategoryFollow",
    "Favorite",
    "JobListing",
    "Location",
    "MailerLog",
    "Proposal",
    "Skill",
    "User",
    "listing_skills",
]
