# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key)
- user_id: uuid (unique, references auth.users.id) - upsert conflict target
- display_name: text (nullable)
- avatar_url: text (nullable) - public URL in the avatars bucket
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

PROFILES_TABLE = "profiles"
ANONYMOUS_DISPLAY_NAME = "Anonymous"
