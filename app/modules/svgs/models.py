# Supabase table: svgs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null) - owner, may differ from the project owner's original upload for forks
- project_id: uuid (foreign key to projects.id, not null)
- name: text (not null)
- description: text (nullable)
- file_path: text (not null) - path in the svg-files bucket, or s3://bucket/key; shared by forks
- file_size: bigint (nullable)
- tags: text[] (nullable)
- views: integer (default: 0)
- downloads: integer (default: 0)
- favorited: boolean (default: false) - single flag, not per viewer
- created_at: timestamp (default: now())
"""

SVGS_TABLE = "svgs"
SVG_CONTENT_TYPE = "image/svg+xml"
