#!/usr/bin/env python3
"""
Delete every manga entry from an AniList account.

Anime entries are left untouched. Entries are deleted one by one with a
fixed delay between requests to stay under AniList's rate limit.
"""

import json
import os
import sys
import time
from typing import Dict, List, NamedTuple, Optional

import requests
from dotenv import find_dotenv, load_dotenv

API_URL = 'https://graphql.anilist.co'
MEDIA_TYPE = 'MANGA'
REQUEST_TIMEOUT = 30

# AniList is currently limited to 30 requests/min (degraded state);
# 2.5s between deletes is ~24 requests/min.
DELETE_DELAY_SECONDS = 2.5
DEFAULT_RETRY_AFTER_SECONDS = 60

_COLOR = sys.stdout.isatty() and os.environ.get('NO_COLOR') is None

RED = '\033[0;31m' if _COLOR else ''
GREEN = '\033[0;32m' if _COLOR else ''
YELLOW = '\033[1;33m' if _COLOR else ''
BLUE = '\033[0;34m' if _COLOR else ''
NC = '\033[0m' if _COLOR else ''

MANGA_LIST_QUERY = '''
query ($username: String, $type: MediaType) {
    MediaListCollection(userName: $username, type: $type) {
        lists {
            name
            entries {
                id
                media {
                    id
                    title {
                        romaji
                        english
                    }
                }
            }
        }
    }
}
'''

DELETE_MUTATION = '''
mutation ($id: Int) {
    DeleteMediaListEntry(id: $id) {
        deleted
    }
}
'''

HELP_TEXT = f'''
{BLUE}#{NC} AniList Bulk Manga Deleter

Deletes all manga entries from your AniList account while leaving anime entries untouched.

{YELLOW}## Getting your AniList access token{NC}

1. Go to https://anilist.co/settings/developer
2. Create a new API client:
    - Name: anything (e.g. "Manga Bulk Deleter")
    - Redirect URL: https://anilist.co/api/v2/oauth/pin
3. Save it and copy your Client ID
4. Open this URL in your browser (replace YOUR_CLIENT_ID):
    https://anilist.co/api/v2/oauth/authorize?client_id=YOUR_CLIENT_ID&response_type=token
5. Authorize the application
6. Copy the access token shown on the redirect page (the string after access_token=)

{YELLOW}## Usage{NC}

{GREEN}python{NC} delete_all_manga.py {YELLOW}[ACCESS_TOKEN]{NC} {YELLOW}[USERNAME]{NC}

Without arguments, ACCESS_TOKEN and USERNAME are read from the environment
or from a {YELLOW}.env{NC} file in the current directory.
'''


class RunResult(NamedTuple):
    deleted: int
    failed: int


def info(msg):
    print(f'{BLUE}❖{NC} {msg}')


def success(msg):
    print(f'{GREEN}✓{NC} {msg}')


def warning(msg):
    print(f'{YELLOW}⚠{NC} {msg}')


def error(msg):
    print(f'{RED}✗{NC} {msg}', file=sys.stderr)


def build_headers(access_token: str) -> Dict[str, str]:
    return {
        'Authorization': f'Bearer {access_token}',
        'Content-Type': 'application/json',
        'Accept': 'application/json',
    }


def show_usage_and_exit():
    print(f'Usage: {BLUE}python{NC} delete_all_manga.py {YELLOW}[ACCESS_TOKEN]{NC} {YELLOW}[USERNAME]{NC}')
    print(f'       {BLUE}python{NC} delete_all_manga.py {GREEN}--help{NC}')
    print(f'\nIf no parameters are provided, the script will use values from a {YELLOW}.env{NC} file')
    print('or from environment variables:')
    print(f'  {YELLOW}ACCESS_TOKEN{NC}=your_token_here')
    print(f'  {YELLOW}USERNAME{NC}=your_username_here')
    print(f'\nRun with {GREEN}--help{NC} for instructions on getting an access token.')
    sys.exit(1)


def get_credentials(args: List[str]):
    """Resolve (access_token, username) from positional args, then the environment."""
    access_token = args[0] if len(args) > 0 and args[0] else None
    username = args[1] if len(args) > 1 and args[1] else None

    if not access_token:
        access_token = os.environ.get('ACCESS_TOKEN') or os.environ.get('ANILIST_TOKEN')
    if not username:
        username = os.environ.get('USERNAME')

    if not access_token or not username:
        show_usage_and_exit()

    return access_token, username


def get_manga_list(access_token: str, username: str) -> List[Dict]:
    """Fetch every manga list of the user. Exits the process on any error."""
    variables = {
        'username': username,
        'type': MEDIA_TYPE,
    }

    response = requests.post(
        API_URL,
        json={'query': MANGA_LIST_QUERY, 'variables': variables},
        headers=build_headers(access_token),
        timeout=REQUEST_TIMEOUT,
    )

    if response.status_code != 200:
        error(f'Error fetching manga list: {response.status_code}')
        error(response.text)
        sys.exit(1)

    data = response.json()

    if data.get('errors'):
        error(f'GraphQL errors: {json.dumps(data["errors"], ensure_ascii=False)}')
        sys.exit(1)

    collection = (data.get('data') or {}).get('MediaListCollection')
    if not collection:
        error('No data returned from API')
        sys.exit(1)

    return collection['lists']


def collect_entries(lists: List[Dict]) -> List[Dict]:
    all_entries = []
    for list_group in lists:
        entries = list_group.get('entries') or []
        info(f"Found {len(entries)} entries in '{list_group.get('name')}' list")
        all_entries.extend(entries)
    return all_entries


def get_media_title(entry: Dict) -> str:
    title = (entry.get('media') or {}).get('title') or {}
    return title.get('romaji') or title.get('english') or 'Unknown'


def _retry_after_seconds(response) -> int:
    retry_after = response.headers.get('Retry-After')
    try:
        seconds = int(float(retry_after))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_RETRY_AFTER_SECONDS
    return max(0, seconds)


def _post_delete(access_token: str, entry_id: int):
    return requests.post(
        API_URL,
        json={'query': DELETE_MUTATION, 'variables': {'id': entry_id}},
        headers=build_headers(access_token),
        timeout=REQUEST_TIMEOUT,
    )


def delete_entry(access_token: str, entry_id: int) -> bool:
    """Delete one list entry, retrying once if rate limited."""
    try:
        response = _post_delete(access_token, entry_id)

        if response.status_code == 429:
            wait_time = _retry_after_seconds(response)
            warning(f'Rate limited. Waiting {wait_time}s...')
            time.sleep(wait_time)
            response = _post_delete(access_token, entry_id)
    except requests.RequestException as e:
        error(f'Error deleting entry {entry_id}: {e}')
        return False

    if response.status_code != 200:
        error(f'Error deleting entry {entry_id}: {response.status_code}')
        error(response.text)
        return False

    try:
        data = response.json()
    except ValueError:
        data = None

    if not isinstance(data, dict):
        error(f'Invalid response for entry {entry_id}: {response.text}')
        return False

    if data.get('errors'):
        error(f'GraphQL errors for entry {entry_id}: {json.dumps(data["errors"], ensure_ascii=False)}')
        return False

    return True


def delete_entries(access_token: str, entries: List[Dict]) -> RunResult:
    deleted_count = 0
    failed_count = 0

    for i, entry in enumerate(entries, 1):
        entry_id = entry['id']
        title = get_media_title(entry)
        print(f'[{i}/{len(entries)}] Deleting: {title} (ID: {entry_id})... ', end='', flush=True)

        if delete_entry(access_token, entry_id):
            deleted_count += 1
            print(f'{GREEN}✓{NC}')
        else:
            failed_count += 1
            print(f'{RED}✗{NC}')

        time.sleep(DELETE_DELAY_SECONDS)

    return RunResult(deleted_count, failed_count)


def confirm(message: str) -> bool:
    try:
        answer = input(message)
    except EOFError:
        return False
    return answer.strip().lower() == 'yes'


def print_summary(result: RunResult):
    print('=' * 50)
    success('Deletion complete!')
    print(f'Successfully deleted: {GREEN}{result.deleted}{NC}')
    if result.failed > 0:
        print(f'Failed: {RED}{result.failed}{NC}')
    print('=' * 50)


def run(args: List[str]) -> int:
    if args and args[0] in ('--help', '-h'):
        print(HELP_TEXT)
        return 0

    load_dotenv(find_dotenv(usecwd=True))
    access_token, username = get_credentials(args)

    info(f'Fetching manga list for user: {username}')
    lists = get_manga_list(access_token, username)
    all_entries = collect_entries(lists)

    if not all_entries:
        warning('No manga entries found. Nothing to delete.')
        return 0

    info(f'Total manga entries to delete: {len(all_entries)}')
    if not confirm(f'\n{YELLOW}Are you sure you want to delete ALL manga entries?{NC} {BLUE}(yes/no){NC}: '):
        warning('Deletion cancelled.')
        return 0

    info('Starting deletion...')
    result = delete_entries(access_token, all_entries)
    print_summary(result)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    try:
        return run(args)
    except KeyboardInterrupt:
        print()
        warning('Interrupted. Entries already deleted stay deleted.')
        return 130
    except Exception as e:
        error(f'Fatal error: {e}')
        return 1


if __name__ == '__main__':
    sys.exit(main())
