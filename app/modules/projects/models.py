# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- name: text (not null)
- description: text (nullable)
- color: text (default: 'bg-blue-500') - palette token, see PROJECT_COLORS
- is_public: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Deleting a project deletes its svgs rows first (application level, see
ProjectService.delete_project).
"""

from enum import Enum

PROJECTS_TABLE = "projects"


class ProjectColor(str, Enum):
    BLUE = "bg-blue-500"
    GREEN = "bg-green-500"
    PURPLE = "bg-purple-500"
    RED = "bg-red-500"
    ORANGE = "bg-orange-500"
    PINK = "bg-pink-500"
    YELLOW = "bg-yellow-500"
    GRAY = "bg-gray-500"


DEFAULT_PROJECT_COLOR = ProjectColor.BLUE.value
