"""
Database bootstrap statements for public.profiles.

Every statement is safe to re-run: tables use IF NOT EXISTS, functions use
CREATE OR REPLACE, and triggers/policies are dropped before being created.
Order matters; the table must exist before its triggers and policies.
"""

PROFILES_TABLE = """CREATE TABLE IF NOT EXISTS public.profiles (
  id UUID REFERENCES auth.users ON DELETE CASCADE PRIMARY KEY,
  email TEXT UNIQUE NOT NULL,
  username TEXT UNIQUE,
  full_name TEXT,
  avatar_url TEXT,
  bio TEXT,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT timezone('utc'::text, now()) NOT NULL,
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT timezone('utc'::text, now()) NOT NULL
)"""

# SECURITY DEFINER: runs as the owner, outside the callers' RLS policies
HANDLE_NEW_USER_FUNCTION = """CREATE OR REPLACE FUNCTION public.handle_new_user()
RETURNS trigger AS $$
BEGIN
  INSERT INTO public.profiles (id, email)
  VALUES (new.id, new.email);
  RETURN new;
END;
$$ LANGUAGE plpgsql SECURITY DEFINER SET search_path = public"""

DROP_NEW_USER_TRIGGER = "DROP TRIGGER IF EXISTS on_auth_user_created ON auth.users"

CREATE_NEW_USER_TRIGGER = """CREATE TRIGGER on_auth_user_created
  AFTER INSERT ON auth.users
  FOR EACH ROW EXECUTE PROCEDURE public.handle_new_user()"""

ENABLE_RLS = "ALTER TABLE public.profiles ENABLE ROW LEVEL SECURITY"

DROP_SELECT_POLICY = 'DROP POLICY IF EXISTS "Users can view own profile" ON public.profiles'

CREATE_SELECT_POLICY = """CREATE POLICY "Users can view own profile" ON public.profiles
  FOR SELECT USING (auth.uid() = id)"""

DROP_UPDATE_POLICY = 'DROP POLICY IF EXISTS "Users can update own profile" ON public.profiles'

CREATE_UPDATE_POLICY = """CREATE POLICY "Users can update own profile" ON public.profiles
  FOR UPDATE USING (auth.uid() = id)"""

HANDLE_UPDATED_AT_FUNCTION = """CREATE OR REPLACE FUNCTION public.handle_updated_at()
RETURNS trigger AS $$
BEGIN
  NEW.updated_at = timezone('utc'::text, now());
  RETURN NEW;
END;
$$ LANGUAGE plpgsql"""

DROP_UPDATED_AT_TRIGGER = "DROP TRIGGER IF EXISTS handle_profiles_updated_at ON public.profiles"

CREATE_UPDATED_AT_TRIGGER = """CREATE TRIGGER handle_profiles_updated_at
  BEFORE UPDATE ON public.profiles
  FOR EACH ROW
  EXECUTE PROCEDURE public.handle_updated_at()"""

# PostgREST caches the schema; ask it to pick up the new table and policies
RELOAD_SCHEMA_CACHE = "NOTIFY pgrst, 'reload schema'"

SETUP_STATEMENTS = [
    PROFILES_TABLE,
    HANDLE_NEW_USER_FUNCTION,
    DROP_NEW_USER_TRIGGER,
    CREATE_NEW_USER_TRIGGER,
    ENABLE_RLS,
    DROP_SELECT_POLICY,
    CREATE_SELECT_POLICY,
    DROP_UPDATE_POLICY,
    CREATE_UPDATE_POLICY,
    HANDLE_UPDATED_AT_FUNCTION,
    DROP_UPDATED_AT_TRIGGER,
    CREATE_UPDATED_AT_TRIGGER,
    RELOAD_SCHEMA_CACHE,
]


def as_script() -> str:
    """All statements as one script, for pasting into the Supabase SQL editor"""
    return ";\n\n".join(SETUP_STATEMENTS) + ";\n"
