# gator

`gator` is a small command-line RSS aggregator. It keeps a list of users,
the feeds they add and the feeds they follow, collects posts from those
feeds on a fixed interval, and lets you browse the newest posts.

Data is kept in a SQLite database. Only the standard library is used.

## Installation

```
pip install .
```

This installs the `gator` command.

## Configuration

`gator` reads its settings from `.gatorconfig.json` in your home
directory. The file must exist before the first run; `gator` does not
create it:

```json
{
  "db_url": "/path/to/gator.db",
  "current_user_name": ""
}
```

`db_url` is the SQLite database `gator` opens: a file path, or a URL of
the form `sqlite:///path/to/gator.db` (`sqlite://` alone opens an
in-memory database). Any other URL scheme is refused. The tables are
created on first use.

`current_user_name` is maintained by the `register`, `login` and `reset`
commands; you do not need to edit it by hand. When the file is rewritten
it holds just these two keys.

## Usage

```
gator <command> [arguments...]
```

On failure `gator` prints the error to standard error and exits with
status 1.

### Users

| Command | What it does |
| --- | --- |
| `gator register <name>` | Create a user and log in as that user. Fails if the name is taken. |
| `gator login <name>` | Switch to an existing user. |
| `gator users` | List all users; the current one is marked `(current)`. |
| `gator reset` | Delete all users (and with them their feeds, follows and posts) and clear the current user. |

### Feeds

`addfeed`, `follow`, `following`, `unfollow` and `browse` act on behalf
of the logged-in user and fail if nobody is logged in.

| Command | What it does |
| --- | --- |
| `gator addfeed <name> <url>` | Add a feed and follow it. Feed URLs are unique. |
| `gator feeds` | List every feed with the user who added it. |
| `gator follow <url>` | Follow a feed that is already known. |
| `gator following` | List the feeds you follow. |
| `gator unfollow <url>` | Stop following a feed. |

### Collecting and reading posts

```
gator agg 1m
```

`agg` runs until interrupted (Ctrl-C ends it with exit status 130). It
scrapes once at start and then once per interval: each time it picks the
feed that was fetched longest ago (never-fetched feeds first), downloads
it and stores its posts. Posts whose URL is already stored are skipped.
The interval is a duration such as `30s`, `1m`, `1h30m`, `1.5h` or
`500ms` (units `ns`, `us`, `ms`, `s`, `m`, `h`); it must be positive.

```
gator browse [limit]
```

`browse` prints the newest posts (by when they were stored) from the
feeds you added, newest first. It shows two posts unless you give a
number; an argument that is not a number is ignored.

## Example session

```
gator register alice
gator addfeed "Example News" https://example.com/rss.xml
gator agg 30s        # leave running for a while, then stop with Ctrl-C
gator browse 5
```

## Using it from Python

The pieces the command is built from can be used directly:

- `gator.config.read_config()` and `Config.set_user()` read and update
  the configuration file.
- `gator.database.connect(url)` returns a `Queries` object with methods
  such as `create_user`, `create_feed`, `create_feed_follow`,
  `create_post`, `get_posts_for_user` and `transaction()`. Missing rows
  raise `NoRowsError`; duplicate unique values raise
  `UniqueConstraintError`.
- `gator.rss.fetch_feed(url)` downloads and parses a feed;
  `gator.rss.parse_feed(data)` parses one already in hand.
- `gator.timeparse.parse_time`, `parse_duration` and `format_duration`
  handle publication dates and intervals.
- `gator.cli.build_commands()` returns the command registry, and
  `gator.cli.main(argv)` runs one command.

## What it does not do

- Storage is SQLite only; there is no support for other database servers.
- Only RSS documents with a `<channel>` of `<item>` elements are read.
  Other feed formats, such as Atom, yield no posts.
- There is no server or interactive interface; every action is a single
  command run.

## Running the tests

```
pip install ".[test]"
pytest
```