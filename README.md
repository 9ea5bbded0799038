# groupnet

groupnet is a small TCP service that keeps track of users and groups in
memory. Clients connect, send one text command per message, and get back a
text reply. Two trackers can run side by side and forward changes to each
other.

The package also ships a few tiny socket programs: a server that adds two
integers sent by a client, and a one-shot message exchange.

It needs nothing beyond the Python standard library (3.10 or later).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The command server

Start a single server (it listens on all addresses, port 8081 by default):

```
groupnet-server
groupnet-server --host 127.0.0.1 --port 9000
```

Then connect with the interactive client (defaults: `--host 127.0.0.1`,
`--port 8081`):

```
groupnet-client
```

The client prints a `> ` prompt, sends each non-empty line you type to the
server and prints the reply as `Message from server is ...`. Typing `exit`, or
ending the input, closes the session.

### Commands

| Command | Meaning |
| --- | --- |
| `create_user <name> <password>` | register a new user |
| `login <name> <password>` | log in on this connection |
| `logout` | log out the current user |
| `create_group <group>` | create a group owned by you |
| `join_group <group>` | ask to join a group |
| `leave_group <group>` | leave a group (owners cannot leave) |
| `list_groups` | list every group |
| `list_requests <group>` | owner only: show pending join requests |
| `accept_request <group> <name>` | owner only: admit a user |

Every command other than `create_user`, `login` and `list_groups` needs a
logged-in user. A command with the wrong number of words gets
`Unknown or invalid command`; an empty one gets `Invalid`. Errors come back as
text starting with `Error:`; for example, logging in to an account that is
already logged in gives `Error: user already logged in`.

Only `logout` ends a login. Closing the connection detaches the user from
that connection, but the account stays marked as logged in, so it cannot log
in again until the server restarts.

A short session:

```
> create_user alice password
Message from server is User alice created successfully

> login alice password
Message from server is User alice logged in successfully

> create_group readers
Message from server is Group readers created successfully

```

### Using it from Python

`groupnet.commands.GroupRegistry` holds the state and runs commands;
`Session` holds the user logged in on one connection:

```python
from groupnet.commands import GroupRegistry, Session

registry = GroupRegistry()
session = Session()
registry.handle_line("create_user alice password", session)
registry.handle_line("login alice password", session)
print(registry.handle_line("list_groups", session))  # "No groups available\n"
```

`groupnet.server.serve(host, port, registry)` runs a `CommandServer`
(a threaded TCP server, one thread per connection) against a registry.

## Paired trackers

A tracker runs the same command service. After a successful
`create_user`, `create_group`, `join_group`, `leave_group` or
`accept_request`, it opens a connection to its peer tracker and sends the
change as a `SYNC ...` command; the peer applies it without forwarding it
again. If the peer cannot be reached, the change is simply not forwarded.

Describe the two trackers in a text file, one `address port` pair per entry:

```
127.0.0.1 6000
127.0.0.1 6001
```

Then start each tracker with the file and its own number (1 or 2):

```
groupnet-tracker tracker_info.txt 1
groupnet-tracker tracker_info.txt 2
```

Tracker 1 forwards to tracker 2 and the other way round. Each tracker listens
on its listed port on all addresses; the listed address is used only to reach
it as a peer. Trackers reply `Error: already logged in` for a second login.

## Socket demos

Adding two numbers: start the server, then run the client, which asks for two
integers, sends them as two 32-bit little-endian signed integers, prints the
sum it receives and sends back an acknowledgement. Both use port 8080 by
default.

```
groupnet-adder-server
groupnet-adder-server --mode sequential
groupnet-adder-client
```

`--mode once` (the default) serves one client and exits, `sequential` serves
clients one after another, and `concurrent` serves each client in its own
thread.

A one-shot message exchange: the receiver waits for one message, prints it
and answers with `--reply`; the sender sends `--message` and prints the answer.

```
groupnet-receiver
groupnet-sender
```

## What it does not do

- Nothing is stored on disk: users, groups and requests are lost when a server
  or tracker stops.
- Passwords are kept and compared as plain text, and travel unencrypted.
- There is no file sharing itself: no files are listed, uploaded or
  downloaded; the service only manages users, groups and membership.
- Between trackers, only new users actually take effect on the peer. The
  other forwarded changes arrive with no logged-in user, so the peer refuses
  them with `Error: please login first` and its groups do not follow.
  Logins and logouts are not forwarded at all.