"""Demo users and dashboard content for local development.

Loaded at startup when YEARBOARD_SEED_DEMO=true (refused in production, see
`web.config`). Content is created through the content service on behalf of
the seeded admin so it passes the same validation as user edits.
"""
from __future__ import annotations

import logging
from typing import Dict, List

from yearboard.dashboard.entities import ContentKind
from yearboard.dashboard.services.content import ContentService
from yearboard.dashboard.store import EntityStore
from yearboard.identity_access.directory import UserDirectory

logger = logging.getLogger("yearboard.dashboard.seed")

DEMO_USERS: List[dict] = [
    {"username": "admin", "password": "admin123", "first_name": "Admin", "last_name": "User",
     "email": "admin@college.edu", "role": "admin", "year": 0,
     "can_access_years": [1, 2, 3], "can_edit_years": [1, 2, 3]},
    {"username": "year1", "password": "password", "first_name": "Arjun", "last_name": "Singh",
     "email": "year1@college.edu", "role": "student", "year": 1,
     "can_access_years": [1], "can_edit_years": []},
    {"username": "year2", "password": "password", "first_name": "Priya", "last_name": "Kumar",
     "email": "year2@college.edu", "role": "student", "year": 2,
     "can_access_years": [2], "can_edit_years": [1]},
    {"username": "year3", "password": "password", "first_name": "Vikram", "last_name": "Patel",
     "email": "year3@college.edu", "role": "student", "year": 3,
     "can_access_years": [3], "can_edit_years": [2]},
    # Final-year mentor: edits year 3 without viewing any dashboard of their own
    {"username": "year4", "password": "password", "first_name": "Ananya", "last_name": "Sharma",
     "email": "year4@college.edu", "role": "student", "year": 4,
     "can_access_years": [], "can_edit_years": [3]},
]

DEMO_CARDS: Dict[int, List[tuple]] = {
    1: [
        ("Choose Electives & Subject Feedback", "Select your electives and view subject details", "book-open", "/electives"),
        ("Subject Materials", "Access notes, presentations, and reference books", "file-alt", "/materials"),
        ("Teacher Feedback", "View teacher profiles and provide feedback", "user-tie", "/teachers"),
        ("Classroom Locator", "Find your way around campus", "map-marker-alt", "/locations"),
        ("Skill Building", "Resources to develop technical skills", "laptop-code", "/skills"),
        ("Clubs & Community", "Join student groups and activities", "users", "/clubs"),
        ("Fee Payment Help", "View fee details and payment options", "credit-card", "/fees"),
        ("Ask the Chatbot", "Get quick answers to common questions", "robot", "/chatbot"),
    ],
    2: [
        ("Subject Guidance", "Advanced subject materials and guides", "book", "/subjects"),
        ("Clubs & Community", "Take leadership roles in clubs", "users", "/clubs"),
        ("Fee Payment Help", "View fee details and payment options", "credit-card", "/fees"),
        ("Teacher Selection Help", "Choose the right teachers for your courses", "chalkboard-teacher", "/teachers"),
        ("Domain Learning Paths", "Specialized learning tracks by domain", "code-branch", "/domains"),
        ("Seniors' Feedback", "Learn from experiences of senior students", "user-graduate", "/feedback"),
        ("Ask the Chatbot", "Get quick answers to common questions", "robot", "/chatbot"),
    ],
    3: [
        ("Advanced Subject Guide", "Specialized resources for advanced topics", "book-reader", "/advanced"),
        ("Project Ideas", "Industry-relevant project suggestions", "lightbulb", "/projects"),
        ("Internship Resources", "Find internships and prepare for interviews", "briefcase", "/internships"),
        ("Research Zone", "Research opportunities and paper guidelines", "flask", "/research"),
        ("Seniors' Roadmap", "Career paths taken by successful alumni", "route", "/roadmap"),
        ("Ask the Chatbot", "Get quick answers to common questions", "robot", "/chatbot"),
    ],
}

DEMO_ANNOUNCEMENTS: Dict[int, List[tuple]] = {
    1: [
        ("Orientation Schedule", "Department orientation will be held on Sept 5th in the Main Auditorium at 10 AM.", "info"),
        ("Timetable Updates", "Updated class timetable for Sem 1 is now available. Check for changes in timing.", "warning"),
        ("Exam Dates", "Mid-semester examination dates have been announced. Check your exam schedule.", "error"),
    ],
    2: [
        ("Elective Deadlines", "Last date for switching electives is Sept 15th. Submit your changes before the deadline.", "info"),
        ("Workshops", "Upcoming workshop on \"Advanced Programming Techniques\" on Saturday.", "warning"),
        ("Placement Prep Events", "Attend the placement preparation session with alumni this Friday.", "error"),
    ],
    3: [
        ("Placement Drive Dates", "The campus placement drive will begin on Oct 15th. Register before Oct 10th.", "info"),
        ("Project Expos", "Final year project exhibition scheduled for Nov 20th. Submit your abstracts.", "warning"),
        ("Paper Submission Deadlines", "Research paper submission deadline for the national conference is Sept 30th.", "error"),
    ],
}

DEMO_RESOURCES: Dict[int, List[tuple]] = {
    1: [
        ("Most Recommended YouTube Playlist by Seniors", "Curated video tutorials for first-year subjects.", "youtube", "/resources/youtube-playlist"),
        ("Beginner Projects You Can Try", "Simple projects to apply what you're learning in classes.", "project-diagram", "/resources/beginner-projects"),
    ],
    2: [
        ("Top Certifications for 2nd Year Students", "Industry-recognized certifications to boost your resume.", "certificate", "/resources/certifications"),
        ("Best Domain to Explore Now", "Trending technologies and domains based on industry demand.", "chart-line", "/resources/domains"),
        ("Recommended Tools", "Essential development tools like Git, VS Code, and more.", "tools", "/resources/tools"),
    ],
    3: [
        ("Top Projects for 3rd Year Students", "Showcase-worthy projects that impress recruiters.", "project-diagram", "/resources/projects"),
        ("How to Build a Strong Resume", "Resume templates and tips from successful graduates.", "file-alt", "/resources/resume"),
        ("Most Common Placement Questions", "Practice with frequently asked technical and HR questions.", "question-circle", "/resources/placement-questions"),
    ],
}


def seed_demo_content(store: EntityStore, directory: UserDirectory) -> None:
    users = [directory.create_user(**fields) for fields in DEMO_USERS]
    admin = users[0]

    cards = ContentService(store, ContentKind.QUICK_ACCESS)
    for year, rows in DEMO_CARDS.items():
        for position, (title, description, icon, link) in enumerate(rows, start=1):
            cards.create(admin, year, {"title": title, "description": description, "icon": icon, "link": link, "order": position})

    announcements = ContentService(store, ContentKind.ANNOUNCEMENTS)
    for year, rows in DEMO_ANNOUNCEMENTS.items():
        for title, content, kind in rows:
            announcements.create(admin, year, {"title": title, "content": content, "type": kind})

    resources = ContentService(store, ContentKind.RESOURCES)
    for year, rows in DEMO_RESOURCES.items():
        for title, description, icon, link in rows:
            resources.create(admin, year, {"title": title, "description": description, "icon": icon, "link": link})

    logger.info(
        "Seeded demo data: users=%s cards=%s announcements=%s resources=%s",
        len(store.users), len(store.quick_access_cards), len(store.announcements), len(store.resources),
    )
