"""OAuth handling for the Gmail API.

Scheduled runs must never block on a browser window, so only the ``auth``
command may start the OAuth consent flow.  ``run`` works from the token it
stored and refreshes it when expired.
"""

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource

from gmail_label_filters.constants import CONFIG_DIR, CREDENTIALS_PATH, SCOPES, TOKEN_PATH
from gmail_label_filters.errors import AuthenticationError


def _missing_credentials() -> FileNotFoundError:
    return FileNotFoundError(
        f"Credentials file not found at {CREDENTIALS_PATH}.\n"
        "Create an OAuth client (Desktop app) in the Google Cloud Console, "
        "download its JSON and save it as:\n"
        f"  {CREDENTIALS_PATH}"
    )


def load_credentials(interactive: bool = False) -> Credentials:
    """Return valid credentials from TOKEN_PATH, refreshing them if needed.

    Without a usable token, ``interactive`` runs the consent flow with the
    client secrets at CREDENTIALS_PATH; otherwise AuthenticationError is raised.
    The resulting token is written back to TOKEN_PATH.
    """
    creds: Credentials | None = None
    if TOKEN_PATH.exists():
        creds = Credentials.from_authorized_user_file(str(TOKEN_PATH), SCOPES)

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    elif not creds or not creds.valid:
        if not CREDENTIALS_PATH.exists():
            raise _missing_credentials()
        if not interactive:
            raise AuthenticationError(
                f"No valid Gmail token at {TOKEN_PATH}. "
                "Run 'gmail-label-filters auth' once to authorize this tool."
            )
        flow = InstalledAppFlow.from_client_secrets_file(str(CREDENTIALS_PATH), SCOPES)
        creds = flow.run_local_server(port=0)

    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    TOKEN_PATH.write_text(creds.to_json())
    return creds


def get_gmail_service(interactive: bool = False) -> Resource:
    """Build a Gmail API service from the stored credentials."""
    return build("gmail", "v1", credentials=load_credentials(interactive), cache_discovery=False)


def check_auth() -> bool:
    """Authorize if needed, then report which account the tool acts for."""
    from gmail_label_filters.display import console

    try:
        service = get_gmail_service(interactive=True)
        profile = service.users().getProfile(userId="me").execute()
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Authentication failed:[/red] {exc}")
        return False

    console.print(f"[green]Authenticated as {profile['emailAddress']}[/green]")
    return True
