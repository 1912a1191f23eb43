# Supabase tables: public.profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# The DDL lives in app/modules/setup/sql.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id ON DELETE CASCADE)
- email: text (unique, not null) - copied from auth.users at signup
- username: text (unique, nullable)
- full_name: text (nullable)
- avatar_url: text (nullable)
- bio: text (nullable)
- created_at: timestamptz (default: utc now, not null)
- updated_at: timestamptz (default: utc now, not null) - refreshed by the
  handle_profiles_updated_at trigger on every update

Rows are inserted by the on_auth_user_created trigger, never by callers.
RLS allows SELECT and UPDATE only where auth.uid() = id; there are no
INSERT or DELETE policies (deletes happen through the auth.users cascade).
"""
