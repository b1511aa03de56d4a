# Supabase table: notifications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (recipient, references auth.users.id)
- type: text (e.g. 'fork')
- title: text
- message: text
- data: jsonb (nullable) - opaque payload
- created_at: timestamp (default: now())
"""

NOTIFICATIONS_TABLE = "notifications"
FORK_NOTIFICATION = "fork"
