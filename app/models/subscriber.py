"""
Modèles des abonnements (adresse postale + newsletter) et des messages de contact.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from enum import Enum


class SubscriptionType(str, Enum):
    """Type d'abonnement"""
    FULL = "full_subscription"  # Formulaire complet avec adresse
    NEWSLETTER = "newsletter_only"  # Email uniquement


class ContactStatus(str, Enum):
    """Statut de traitement d'un message"""
    UNREAD = "unread"
    READ = "read"
    ARCHIVED = "archived"


class SubscriptionRequest(BaseModel):
    """Requête d'abonnement complet"""
    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)
    street_address: Optional[str] = Field(None, alias="streetAddress")
    street_address2: Optional[str] = Field(None, alias="streetAddress2")
    city: Optional[str] = None
    state: Optional[str] = None
    telephone: Optional[str] = None
    email: EmailStr

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "firstName": "Jane",
                "lastName": "Doe",
                "city": "Brooklyn",
                "state": "NY",
                "email": "jane@example.com"
            }
        }


class NewsletterRequest(BaseModel):
    """Requête d'inscription à la newsletter seule"""
    email: EmailStr


class ContactRequest(BaseModel):
    """Message envoyé depuis la page contact"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    subject: str = ""
    message: str = Field(..., min_length=1)
