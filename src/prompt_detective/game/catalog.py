"""Fixed catalogues the case generators pick from."""

import random
from typing import Optional

from prompt_detective.core.schemas import CO_STAR_ELEMENTS

# Everyday, safe, relatable situations for detective cases
SCENARIOS = (
    # Work & team
    "planning a team lunch outing",
    "writing a thank-you note to a colleague",
    "drafting a meeting agenda",
    "creating a welcome message for a new team member",
    "summarizing meeting notes for the team",
    "organizing a team-building activity",
    # Community & social
    "planning a neighborhood potluck dinner",
    "writing an invitation for a book club meeting",
    "organizing a community volunteer day",
    "creating a birthday party itinerary",
    "drafting a thank-you card for a gift",
    "planning a picnic with friends",
    # Creative & hobbies
    "writing a movie review for a film blog",
    "creating a playlist description for a road trip",
    "drafting a caption for a travel photo",
    "writing a book recommendation",
    "creating a recipe card for a family dish",
    "describing a favorite hobby to share online",
    # Everyday life
    "writing a grocery list for a dinner party",
    "creating a packing checklist for a vacation",
    "drafting a schedule for a home renovation project",
    "organizing a weekly meal plan",
    "writing instructions for a pet sitter",
    "creating a to-do list for a busy weekend",
    # Learning
    "explaining a fun science fact to kids",
    "writing study notes for an upcoming exam",
    "creating a how-to guide for a craft project",
    "summarizing a chapter from a textbook",
    "drafting a presentation about a favorite topic",
    "writing tips for learning a new language",
    # Lifestyle
    "creating a morning routine guide",
    "writing a beginner's workout plan",
    "planning a relaxing weekend at home",
    "drafting goals for the new year",
    "creating a reading list for the month",
    "writing tips for staying organized",
)

# Requests the auditor-mode AI gets wrong
AUDIT_DOMAINS = (
    "a weekend travel itinerary for a family trip",
    "a summary of a popular book or novel",
    "a recipe for a family dinner",
    "a product review for kitchen appliances",
    "an overview of a fun historical event",
    "a comparison of popular coffee shops",
    "a guide to local parks and hiking trails",
    "a movie recommendation with plot summary",
    "a pet adoption profile for an animal shelter",
    "a description of a local community event",
    "an itinerary for a birthday celebration",
    "a packing list for a camping trip",
    "a restaurant menu description",
    "a summary of a popular podcast episode",
    "a guide to beginner-friendly board games",
)


def case_number(rng: Optional[random.Random] = None) -> str:
    """Three-digit case number, 100-999."""
    return str((rng or random).randint(100, 999))


def pick_element(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(CO_STAR_ELEMENTS)


def pick_scenario(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(SCENARIOS)


def pick_domain(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(AUDIT_DOMAINS)
