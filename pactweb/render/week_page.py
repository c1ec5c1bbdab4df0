"""Server-rendered week-view page.

The page keeps the ``today`` it was rendered with; on window focus and on
network reconnect it re-requests the JSON week view for that same day and
redraws only the log lists.
"""
import json
from html import escape

from pactweb.schemas.week import WeekDayOut, WeekViewResponse

_STYLE = """
body { font-family: system-ui, sans-serif; background: #09090b; color: #e4e4e7; margin: 0; }
main { max-width: 64rem; margin: 0 auto; padding: 2.5rem 1rem; }
header { display: flex; justify-content: space-between; align-items: center; gap: .75rem; }
#days { display: flex; flex-direction: column; gap: 1rem; max-height: 70vh; overflow-y: auto; padding: 1rem; }
.day { border: 1px solid #27272a; border-radius: .75rem; padding: 1.25rem; flex-shrink: 0; }
.day.today { border-color: #3b82f6; }
.badge { font-size: .75rem; padding: .1rem .5rem; border-radius: .25rem; border: 1px solid; }
.spinner { visibility: hidden; }
.refetching .spinner { visibility: visible; }
@media (min-width: __WIDE__px) {
  #days { flex-direction: row; overflow-x: auto; overflow-y: hidden; max-height: none; }
  .day { width: 16rem; }
}
"""

_SCRIPT = """
(function () {
  var list = document.getElementById("days");
  var view = JSON.parse(document.getElementById("week-data").textContent);

  function center() {
    var el = list.children[view.scroll.center_index];
    if (!el) return;
    if (window.innerWidth >= view.scroll.wide_min_width) {
      list.scrollTo({ left: el.offsetLeft - list.clientWidth / 2 + el.clientWidth / 2, behavior: "smooth" });
    } else {
      list.scrollTo({ top: el.offsetTop - list.clientHeight / 2 + el.clientHeight / 2, behavior: "smooth" });
    }
  }

  function esc(s) {
    var d = document.createElement("div");
    d.textContent = s == null ? "" : String(s);
    return d.innerHTML;
  }

  function logsHtml(day) {
    if (day.logs.length) {
      return day.logs.map(function (item) {
        var verified = item.log.verified ? ' <span class="badge">Verified</span>' : "";
        var notes = item.log.notes ? "<div>" + esc(item.log.notes) + "</div>" : "";
        return '<a class="log" href="' + esc(item.href) + '">View activity log' + verified + notes + "</a>";
      }).join("");
    }
    if (day.add_log_href) {
      return '<a class="add" href="' + esc(day.add_log_href) + '">+ Add Activity Log</a>';
    }
    return '<div class="empty">No activity logged.</div>';
  }

  function refetch() {
    document.body.classList.add("refetching");
    fetch(view.refresh_url, { credentials: "same-origin" })
      .then(function (res) { return res.ok ? res.json() : null; })
      .then(function (fresh) {
        if (!fresh) return;
        fresh.days.forEach(function (day, idx) {
          var cell = list.children[idx];
          if (cell) cell.querySelector(".logs").innerHTML = logsHtml(day);
        });
      })
      .finally(function () { document.body.classList.remove("refetching"); });
  }

  window.addEventListener("focus", refetch);
  window.addEventListener("online", refetch);
  center();
})();
"""


def _render_logs(day: WeekDayOut) -> str:
    if day.logs:
        parts = []
        for item in day.logs:
            verified = ' <span class="badge">Verified</span>' if item.log.verified else ""
            notes = f"<div>{escape(item.log.notes)}</div>" if item.log.notes else ""
            parts.append(f'<a class="log" href="{escape(item.href)}">View activity log{verified}{notes}</a>')
        return "".join(parts)
    if day.add_log_href:
        return f'<a class="add" href="{escape(day.add_log_href)}">+ Add Activity Log</a>'
    return '<div class="empty">No activity logged.</div>'


def _render_day(day: WeekDayOut) -> str:
    today_badge = ' <span class="badge">Today</span>' if day.is_today else ""
    css = "day today" if day.is_today else "day"
    return (
        f'<div class="{css}" data-key="{day.key}">'
        f"<div><strong>{day.weekday}</strong>{today_badge}</div>"
        f"<div>{escape(day.label)}</div>"
        f'<div class="logs">{_render_logs(day)}</div>'
        "</div>"
    )


def render_week_page(view: WeekViewResponse, refresh_url: str) -> str:
    payload = view.model_dump(mode="json")
    payload["refresh_url"] = refresh_url
    # Keep the embedded JSON from closing the script element early.
    data = json.dumps(payload).replace("</", "<\\/")
    style = _STYLE.replace("__WIDE__", str(view.scroll.wide_min_width))
    days_html = "".join(_render_day(day) for day in view.days)
    return (
        "<!doctype html><html><head><meta charset='utf-8'>"
        f"<title>{escape(view.pact_title)}</title><style>{style}</style></head><body><main>"
        f"<header><div><h1>{escape(view.pact_title)}</h1><p>{escape(view.range_label)}</p>"
        '<span class="spinner">Refreshing…</span></div>'
        '<a href="/pacts">Explore Pacts</a></header>'
        f'<div id="days">{days_html}</div>'
        f'<script type="application/json" id="week-data">{data}</script>'
        f"<script>{_SCRIPT}</script>"
        "</main></body></html>"
    )
