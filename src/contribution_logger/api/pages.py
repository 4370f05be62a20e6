"""Minimal HTML pages. Every interpolated value must already be cleaned."""

import json

from contribution_logger.domain.contributions import RecentEntry

_PAGE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Contribution Logger</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }}
      label {{ display: block; margin-top: 0.6rem; }}
      input, textarea {{ padding: 0.4rem 0.6rem; width: 320px; }}
      table {{ border-collapse: collapse; margin-top: 1rem; }}
      td, th {{ padding: 0.3rem 0.6rem; border-bottom: 1px solid #ddd; }}
    </style>
    <script src="https://login.persona.org/include.js"></script>
  </head>
  <body>
    <h1>Contribution Logger</h1>
{body}
    <script>
      var currentUser = {current_user_js};
      navigator.id.watch({{
        loggedInUser: currentUser,
        onlogin: function (assertion) {{
          fetch('/persona/verify', {{
            method: 'POST',
            headers: {{ 'Content-Type': 'application/json' }},
            body: JSON.stringify({{ assertion: assertion }})
          }}).then(function (res) {{ return res.json(); }}).then(function (data) {{
            if (data.status === 'okay') {{ window.location = '/'; }}
            else {{ navigator.id.logout(); alert(data.reason); }}
          }});
        }},
        onlogout: function () {{
          fetch('/persona/logout', {{ method: 'POST' }}).then(function () {{
            if (currentUser) {{ window.location = '/'; }}
          }});
        }}
      }});
    </script>
  </body>
</html>
"""


def render_home(current_user: str, authorized: bool) -> str:
    """Landing page with the sign-in control."""
    if current_user and not authorized:
        status_line = f"<p>Signed in as {current_user}, but not authorized.</p>"
    elif current_user:
        status_line = f"<p>Signed in as {current_user}.</p>"
    else:
        status_line = "<p>Sign in with your work email to log contributions.</p>"
    body = f"""    {status_line}
    <button onclick="navigator.id.request()">Sign in</button>
    <button onclick="navigator.id.logout()">Sign out</button>"""
    return _page(body, current_user)


def render_log_form(
    current_user: str,
    username: str,
    values: dict[str, str],
    recent: list[RecentEntry],
) -> str:
    """Logging form with the user's recent entries."""
    date_value = values.get("date", "")
    team_value = values.get("team", "")
    type_value = values.get("type", "")
    description_value = values.get("description", "")
    rows = "\n".join(
        f"""        <tr>
          <td>{entry.contribution_date}</td>
          <td>{entry.contributor_id}</td>
          <td>{entry.mofo_team}</td>
          <td>{entry.data_bucket}</td>
          <td>{entry.type}</td>
          <td>{entry.description}</td>
          <td><a href="/log-em?{entry.repeat_query}">again</a></td>
          <td><a href="/delete?{entry.delete_query}">delete</a></td>
        </tr>"""
        for entry in recent
    )
    body = f"""    <p>Hi {username}. <button onclick="navigator.id.logout()">Sign out</button></p>
    <form method="post" action="/log-em">
      <label>Contributor <input name="contributor_id" required /></label>
      <label>Date <input name="contribution_date" type="date"
        value="{date_value}" required /></label>
      <label>Team <input name="mofo_team" value="{team_value}" required /></label>
      <label>Data bucket <input name="data_bucket" required /></label>
      <label>Type <input name="type" value="{type_value}" /></label>
      <label>Description <textarea name="description">{description_value}</textarea></label>
      <button type="submit">Log it</button>
    </form>
    <h2 id="logged">Recently logged</h2>
    <table>
{rows}
    </table>"""
    return _page(body, current_user)


def _page(body: str, current_user: str) -> str:
    current_user_js = json.dumps(current_user) if current_user else "null"
    return _PAGE.format(body=body, current_user_js=current_user_js)
