import plotly.express as px
import pandas as pd


def memory_breakdown(report_data):
    """Flattens a JSON report into (component, part, bytes) rows."""
    if not report_data:
        return []
    cache = report_data.get('cache', {})
    paging = report_data.get('physical_memory', {})
    traces = report_data.get('config', {}).get('trace_files', [])

    rows = []
    if cache:
        rows.append({'component': 'Cache', 'part': 'Data', 'bytes': cache['data_bytes']})
        rows.append({'component': 'Cache', 'part': 'Tag + Valid', 'bytes': cache['overhead_bytes']})
    if paging and traces:
        # Every trace gets an identically sized page table.
        per_trace = paging['page_table_total_bytes'] // len(traces)
        for name in traces:
            rows.append({'component': 'Page Tables', 'part': name, 'bytes': per_trace})
    return rows


def export_memory_chart(report_data, path: str):
    rows = memory_breakdown(report_data)
    if not rows:
        with open(path, "w") as f:
            f.write("<h1>Memory Breakdown</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(rows)
    df['bytes'] = pd.to_numeric(df['bytes'], errors='coerce')
    df = df.dropna(subset=['bytes'])
    df['kb'] = df['bytes'] / 1024.0

    fig = px.bar(
        df,
        x="component",
        y="kb",
        color="part",
        text="bytes",
        hover_data=['part', 'bytes'],
        title="Implementation Memory Breakdown",
        labels={"component": "Structure", "kb": "Size (KB)", "part": "Part"}
    )

    fig.update_layout(
        barmode="stack",
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Part"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_memory_ascii(report_data):
    rows = memory_breakdown(report_data)
    if not rows:
        return "Memory breakdown is empty."

    largest = max(row['bytes'] for row in rows)
    if largest == 0:
        return "Memory breakdown has no size."

    chart = "Implementation Memory Breakdown (ASCII)\n"
    chart += ("-" * 90) + "\n"
    scale = 60.0 / largest  # Scale to 60 characters width
    for row in rows:
        label = f"{row['component']}:{row['part']}"[:20]
        bar = '#' * max(1, int(row['bytes'] * scale)) if row['bytes'] > 0 else ''
        chart += f"{label:>20} |{bar} {row['bytes']} B\n"
    chart += ("-" * 90) + "\n"
    return chart
