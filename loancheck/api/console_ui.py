from __future__ import annotations


def render_console_html() -> str:
    return """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>LoanCheck Console</title>
  <style>
    :root {
      --bg: #f3efe6;
      --paper: #fffaf1;
      --ink: #1f1d1a;
      --muted: #6d665d;
      --line: #d8cfbf;
      --accent: #0f766e;
      --good: #166534;
      --warn: #b45309;
      --bad: #b91c1c;
      --shadow: 0 10px 30px rgba(31, 29, 26, 0.08);
      --radius: 14px;
      --mono: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "Liberation Mono", monospace;
      --sans: "Avenir Next", "Segoe UI", system-ui, sans-serif;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: var(--sans);
      color: var(--ink);
      background: linear-gradient(180deg, #f4f0e8 0%, #efe9dd 100%);
    }
    .wrap { max-width: 1320px; margin: 0 auto; padding: 22px 18px 40px; }
    .hero {
      background: linear-gradient(135deg, rgba(255,250,241,.92), rgba(250,242,228,.92));
      border: 1px solid var(--line);
      border-radius: 18px;
      padding: 18px;
      box-shadow: var(--shadow);
      margin-bottom: 16px;
    }
    .hero h1 { margin: 0 0 4px; font-size: 1.4rem; letter-spacing: .02em; }
    .hero p { margin: 0; color: var(--muted); }
    .toolbar { display: grid; gap: 12px; grid-template-columns: 1.4fr 1fr 1.2fr auto; margin: 12px 0 16px; }
    .grid { display: grid; gap: 12px; grid-template-columns: .9fr 1.1fr; }
    .stack { display: grid; gap: 12px; align-content: start; }
    .card {
      background: var(--paper);
      border: 1px solid var(--line);
      border-radius: var(--radius);
      box-shadow: var(--shadow);
      overflow: hidden;
    }
    .card h2 {
      margin: 0;
      padding: 12px 14px;
      font-size: .95rem;
      letter-spacing: .04em;
      text-transform: uppercase;
      border-bottom: 1px solid var(--line);
      background: rgba(255,255,255,.55);
    }
    .card .body { padding: 12px 14px; }
    label { display: block; font-size: .75rem; color: var(--muted); margin-bottom: 4px; text-transform: uppercase; letter-spacing: .04em; }
    input, textarea, button {
      width: 100%;
      border-radius: 10px;
      border: 1px solid var(--line);
      background: #fff;
      color: var(--ink);
      font: inherit;
      padding: 10px 11px;
    }
    textarea { min-height: 280px; resize: vertical; font-family: var(--mono); font-size: .86rem; }
    button { cursor: pointer; background: linear-gradient(180deg, #fff, #f5f0e5); }
    button.primary { background: linear-gradient(180deg, #117c73, #0f766e); color: #fff; border-color: #0f766e; }
    button.secondary { background: linear-gradient(180deg, #c96f1b, #b45309); color: #fff; border-color: #b45309; }
    button.inline { width: auto; padding: 4px 10px; }
    .row { display: grid; gap: 10px; grid-template-columns: repeat(2, minmax(0, 1fr)); margin-top: 10px; }
    pre {
      margin: 0; white-space: pre-wrap; word-break: break-word;
      background: #1f2329; color: #e5e7eb; border-radius: 10px; padding: 12px;
      font-family: var(--mono); font-size: .79rem; line-height: 1.4;
      max-height: 360px; overflow: auto;
    }
    .list { display: grid; gap: 6px; max-height: 320px; overflow: auto; }
    .item {
      display: flex; justify-content: space-between; align-items: center;
      border: 1px solid var(--line); background: rgba(255,255,255,.78); border-radius: 12px; padding: 8px 10px;
    }
    .item .sub { color: var(--muted); font-size: .82rem; }
    table { width: 100%; border-collapse: collapse; font-size: .84rem; }
    th, td { text-align: left; padding: 6px 8px; border-bottom: 1px solid var(--line); }
    th { color: var(--muted); font-size: .72rem; text-transform: uppercase; letter-spacing: .04em; }
    td.status-success { color: var(--good); }
    td.status-invalid { color: var(--warn); }
    td.status-error { color: var(--bad); }
    .bars { display: grid; gap: 8px; }
    .bar { display: grid; grid-template-columns: 140px 1fr 48px; gap: 8px; align-items: center; font-size: .84rem; }
    .bar .track { background: rgba(31,29,26,.06); border-radius: 999px; height: 14px; overflow: hidden; }
    .bar .fill { background: var(--accent); height: 100%; }
    .bar .code { font-family: var(--mono); }
    .message { margin: 0 0 12px; padding: 10px 14px; border-radius: 10px; border: 1px solid var(--line); background: #fff; }
    .message.error { color: var(--bad); border-color: var(--bad); }
    .links a { margin-right: 12px; color: var(--accent); }
    .hidden { display: none !important; }
    @media (max-width: 1080px) {
      .toolbar, .grid { grid-template-columns: 1fr; }
    }
  </style>
</head>
<body>
  <div class="wrap">
    <section class="hero">
      <h1>LoanCheck Console</h1>
      <p>Get a token, upload customer CSV, check one payload or submit every row, then review and export results.</p>
    </section>

    <section class="toolbar">
      <div>
        <label for="apiBase">API Base</label>
        <input id="apiBase" value="" placeholder="http://127.0.0.1:8000" />
      </div>
      <div>
        <label for="apiKey">X-API-Key (optional)</label>
        <input id="apiKey" value="" placeholder="server key if auth enabled" />
      </div>
      <div>
        <label for="csvFile">Customer CSV</label>
        <input id="csvFile" type="file" accept=".csv" />
      </div>
      <div style="align-self:end;">
        <button id="tokenBtn" class="primary">Get Token</button>
      </div>
    </section>

    <p id="message" class="message hidden"></p>

    <section class="grid">
      <div class="stack">
        <div class="card">
          <h2>CSV Rows</h2>
          <div class="body">
            <div id="rowsList" class="list"></div>
            <div class="row">
              <button id="bulkBtn" class="secondary">Submit All Rows</button>
              <button id="refreshBtn">Refresh Results</button>
            </div>
          </div>
        </div>
        <div class="card">
          <h2>Payload</h2>
          <div class="body">
            <textarea id="payloadText" spellcheck="false"></textarea>
            <div class="row">
              <button id="checkBtn" class="primary">Check Eligibility</button>
            </div>
          </div>
        </div>
        <div class="card">
          <h2>Response</h2>
          <div class="body"><pre id="responseJson">{}</pre></div>
        </div>
      </div>

      <div class="stack">
        <div class="card">
          <h2>Response Code Distribution</h2>
          <div class="body"><div id="distributionBars" class="bars"></div></div>
        </div>
        <div class="card">
          <h2>Bulk Results</h2>
          <div class="body">
            <div class="links">
              <a href="#" id="exportCsvLink">Export Results to CSV</a>
              <a href="#" id="exportXlsxLink">Export Results to XLSX</a>
            </div>
            <table>
              <thead>
                <tr>
                  <th>Row</th><th>Name</th><th>Phone</th><th>Email</th>
                  <th>Purpose ID</th><th>Status</th><th>Code</th><th>Description</th>
                </tr>
              </thead>
              <tbody id="resultsBody"></tbody>
            </table>
          </div>
        </div>
      </div>
    </section>
  </div>

  <script>
    (() => {
      const $ = (id) => document.getElementById(id);
      const els = {
        apiBase: $("apiBase"),
        apiKey: $("apiKey"),
        csvFile: $("csvFile"),
        tokenBtn: $("tokenBtn"),
        message: $("message"),
        rowsList: $("rowsList"),
        bulkBtn: $("bulkBtn"),
        refreshBtn: $("refreshBtn"),
        payloadText: $("payloadText"),
        checkBtn: $("checkBtn"),
        responseJson: $("responseJson"),
        distributionBars: $("distributionBars"),
        resultsBody: $("resultsBody"),
        exportCsvLink: $("exportCsvLink"),
        exportXlsxLink: $("exportXlsxLink"),
      };

      function initDefaults() {
        els.apiBase.value = localStorage.getItem("loancheck_console_api_base") || window.location.origin;
        els.apiKey.value = localStorage.getItem("loancheck_console_api_key") || "";
      }

      function persistBasics() {
        localStorage.setItem("loancheck_console_api_base", els.apiBase.value.trim());
        localStorage.setItem("loancheck_console_api_key", els.apiKey.value.trim());
      }

      function apiBase() {
        const base = els.apiBase.value.trim() || window.location.origin;
        return base.endsWith("/") ? base.slice(0, -1) : base;
      }

      function headers(extra = {}) {
        const h = { ...extra };
        const apiKey = els.apiKey.value.trim();
        if (apiKey) h["X-API-Key"] = apiKey;
        return h;
      }

      async function apiFetch(path, opts = {}) {
        persistBasics();
        const res = await fetch(`${apiBase()}${path}`, {
          ...opts,
          headers: { ...(opts.headers || {}), ...headers() },
        });
        const ct = res.headers.get("content-type") || "";
        const body = ct.includes("application/json") ? await res.json() : await res.text();
        if (!res.ok) {
          const detail = body && typeof body === "object" && body.detail ? body.detail : body;
          throw new Error(typeof detail === "string" ? detail : JSON.stringify(detail));
        }
        return body;
      }

      function showMessage(text, isError = false) {
        if (!text) {
          els.message.classList.add("hidden");
          return;
        }
        els.message.textContent = text;
        els.message.classList.toggle("error", isError);
        els.message.classList.remove("hidden");
      }

      function cell(tr, value, className) {
        const td = document.createElement("td");
        td.textContent = value == null ? "" : String(value);
        if (className) td.className = className;
        tr.appendChild(td);
      }

      function renderRows(rows) {
        els.rowsList.innerHTML = "";
        for (const row of rows) {
          const item = document.createElement("div");
          item.className = "item";
          const label = document.createElement("div");
          const name = `${row.meta.firstName || ""} ${row.meta.lastName || ""}`.trim();
          label.innerHTML = `<div>Row ${row.id}</div>`;
          const sub = document.createElement("div");
          sub.className = "sub";
          sub.textContent = [name, row.payload.purposeId].filter(Boolean).join(" / ");
          label.appendChild(sub);
          const btn = document.createElement("button");
          btn.className = "inline";
          btn.textContent = "Select";
          btn.addEventListener("click", () => selectPayload(row.id));
          item.appendChild(label);
          item.appendChild(btn);
          els.rowsList.appendChild(item);
        }
      }

      function renderResults(rows) {
        els.resultsBody.innerHTML = "";
        for (const r of rows) {
          const tr = document.createElement("tr");
          cell(tr, r.rowId);
          cell(tr, `${r.firstName} ${r.lastName}`.trim());
          cell(tr, r.phone);
          cell(tr, r.email);
          cell(tr, r.purposeId);
          cell(tr, r.status.toUpperCase(), `status-${r.status}`);
          cell(tr, r.eligibilityCode);
          cell(tr, r.eligibilityDescription);
          els.resultsBody.appendChild(tr);
        }
      }

      function renderDistribution(dist) {
        els.distributionBars.innerHTML = "";
        const max = Math.max(1, ...dist.entries.map((e) => e.count));
        for (const entry of dist.entries) {
          const bar = document.createElement("div");
          bar.className = "bar";
          bar.title = entry.description;
          const code = document.createElement("div");
          code.className = "code";
          code.textContent = entry.responseCode;
          const track = document.createElement("div");
          track.className = "track";
          const fill = document.createElement("div");
          fill.className = "fill";
          fill.style.width = `${Math.round((entry.count / max) * 100)}%`;
          track.appendChild(fill);
          const count = document.createElement("div");
          count.textContent = String(entry.count);
          bar.appendChild(code);
          bar.appendChild(track);
          bar.appendChild(count);
          els.distributionBars.appendChild(bar);
        }
      }

      async function refreshRows() {
        const body = await apiFetch("/rows");
        renderRows(body.rows);
      }

      async function refreshResults() {
        const [results, dist] = await Promise.all([apiFetch("/results"), apiFetch("/results/distribution")]);
        renderResults(results.rows);
        renderDistribution(dist);
      }

      async function getToken() {
        try {
          const body = await apiFetch("/token", { method: "POST" });
          showMessage(body.message);
        } catch (err) {
          showMessage(err.message, true);
        }
      }

      async function uploadCsv() {
        const file = els.csvFile.files[0];
        if (!file) return;
        const form = new FormData();
        form.append("file", file);
        try {
          const body = await apiFetch("/csv", { method: "POST", body: form });
          showMessage(`Loaded ${body.row_count} rows.`);
          await refreshRows();
        } catch (err) {
          showMessage(err.message, true);
        }
      }

      async function selectPayload(rowId) {
        try {
          const body = await apiFetch(`/rows/${rowId}/payload`);
          els.payloadText.value = body.payload_text;
          els.responseJson.textContent = "{}";
          showMessage("");
        } catch (err) {
          showMessage(err.message, true);
        }
      }

      async function checkEligibility() {
        try {
          const body = await apiFetch("/check", {
            method: "POST",
            headers: { "Content-Type": "application/json" },
            body: JSON.stringify({ payload: els.payloadText.value }),
          });
          els.responseJson.textContent = JSON.stringify(body.response, null, 2);
          showMessage("");
        } catch (err) {
          showMessage(err.message, true);
        }
      }

      async function submitAll() {
        els.bulkBtn.disabled = true;
        try {
          const body = await apiFetch("/bulk", { method: "POST" });
          if (body.message) showMessage(body.message, body.status !== "done");
          else showMessage(`Processed ${body.outcome_count} of ${body.row_count} rows.`);
          await refreshResults();
        } catch (err) {
          showMessage(err.message, true);
        } finally {
          els.bulkBtn.disabled = false;
        }
      }

      async function exportResults(fmt) {
        try {
          const res = await fetch(`${apiBase()}/export?format=${fmt}`, { headers: headers() });
          if (!res.ok) throw new Error(`Export failed: ${res.status}`);
          const url = URL.createObjectURL(await res.blob());
          const link = document.createElement("a");
          link.href = url;
          link.download = fmt === "xlsx" ? "veritec_results.xlsx" : "veritec_results.csv";
          link.click();
          URL.revokeObjectURL(url);
        } catch (err) {
          showMessage(err.message, true);
        }
      }

      initDefaults();
      els.tokenBtn.addEventListener("click", getToken);
      els.csvFile.addEventListener("change", uploadCsv);
      els.checkBtn.addEventListener("click", checkEligibility);
      els.bulkBtn.addEventListener("click", submitAll);
      els.refreshBtn.addEventListener("click", () => refreshResults().catch((err) => showMessage(err.message, true)));
      els.exportCsvLink.addEventListener("click", (e) => { e.preventDefault(); exportResults("csv"); });
      els.exportXlsxLink.addEventListener("click", (e) => { e.preventDefault(); exportResults("xlsx"); });
      refreshRows().catch(() => {});
      refreshResults().catch(() => {});
    })();
  </script>
</body>
</html>
"""
