"""
Web UI route handlers for the listing console.
"""
import json
import logging
from html import escape
from typing import Iterable, List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from listing_engine.models import FilterCriteria, ListingRecord
from listing_engine.utils import format_timestamp, parse_number

from ..client import ListingsApiError
from ..config import config
from ..store import ListingNotFoundError, ListingStore, get_store
from .listings import get_listing_filters

logger = logging.getLogger(__name__)
router = APIRouter(tags=["ui"])

PAGE_HEAD = '''<!doctype html>
<html lang="en" class="h-full">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>{title}</title>
  <script src="https://unpkg.com/htmx.org@1.9.12"></script>
  <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="h-full bg-slate-50 text-slate-900">
<div class="max-w-7xl mx-auto px-4 py-6">'''

PAGE_FOOT = '</div></body></html>'

BEDROOM_CHOICES = ["Studio", "1", "2", "3", "4", "5", "6", "7", "8", "9", "10"]
BATHROOM_CHOICES = ["1", "2", "3", "4", "5", "6", "7", "8", "9", "10"]
FACING_DIRECTIONS = ["North", "Northeast", "East", "Southeast", "South", "Southwest", "West", "Northwest"]


def bedroom_label(option: str) -> str:
    """"3" reads as "3 Bedroom more" because the filter treats it as 3 or more."""
    number = parse_number(option)
    if number is None:
        return option
    return f"{option} Bedroom more" if number > 2 else f"{option} Bedroom"


def bathroom_label(option: str) -> str:
    number = parse_number(option)
    if number is None:
        return option
    return f"{option} Bathroom more" if number > 2 else f"{option} Bathroom"


def _options(values: Iterable[str], label=None, selected: Iterable[str] = ()) -> str:
    selected = set(selected)
    parts = []
    for v in values:
        text = label(v) if label else v
        sel = ' selected' if v in selected else ''
        parts.append(f'<option value="{escape(v)}"{sel}>{escape(text)}</option>')
    return ''.join(parts)


def _multi_select(name: str, label: str, values: List[str], option_label=None) -> str:
    return (f'<label class="text-sm text-slate-600">{escape(label)}'
            f'<select multiple class="border rounded px-3 py-2 w-full h-24" name="{name}">'
            f'{_options(values, option_label)}</select></label>')


def _criteria_query(criteria: FilterCriteria) -> str:
    """Rebuild the query string for pagination links."""
    params = []
    for name, values in (
        ("project_name", criteria.project_names), ("sku", criteria.skus),
        ("area_lp", criteria.area_lp), ("post_type", criteria.post_types),
        ("property_type", criteria.property_types), ("availability", criteria.availability),
        ("bedroom", criteria.bedrooms), ("bathroom", criteria.bathrooms),
        ("post_from", criteria.post_from), ("area_lv", criteria.area_lv),
    ):
        params.extend((name, v) for v in values)
    for name in ("min_price", "max_price", "min_area_size", "max_area_size", "update_availability", "tel"):
        value = getattr(criteria, name)
        if value is not None:
            params.append((name, str(value)))
    if criteria.pet_allowed:
        params.append(("pet_allowed", "true"))
    if criteria.exclusive:
        params.append(("exclusive", "true"))
    return urlencode(params)


@router.get('/', response_class=HTMLResponse)
async def index(store: ListingStore = Depends(get_store)):
    """Main page with the search form and listing table."""
    try:
        facets = await store.facets()
    except ListingsApiError as e:
        logger.error(f"Error loading facets for index: {e}")
        return HTMLResponse('<div class="text-red-600">Error loading listings</div>', status_code=502)

    html_parts = [PAGE_HEAD.format(title="Listing Console")]
    html_parts.append('<div class="flex items-center justify-between mb-4">'
                      '<h1 class="text-2xl font-semibold">Listings</h1>'
                      '<a class="px-3 py-2 rounded bg-slate-800 text-white" href="/new">Add property</a></div>')
    html_parts.append('<form id="filters" class="grid grid-cols-1 md:grid-cols-4 gap-3 mb-4 bg-white p-4 rounded-xl shadow" '
                      'hx-get="/ui/table" hx-target="#table">')
    html_parts.append('<div class="md:col-span-4 font-medium">Property Information</div>')
    html_parts.append(_multi_select("area_lp", "Area LP", facets.area_lp))
    html_parts.append(_multi_select("area_lv", "Area Group", facets.area_lv))
    html_parts.append(_multi_select("project_name", "Project Name", facets.project_names))
    html_parts.append(_multi_select("sku", "LP Code", facets.skus))
    html_parts.append(_multi_select("post_type", "Post Type", facets.post_types))
    html_parts.append(_multi_select("post_from", "Post From", facets.post_from))
    html_parts.append(_multi_select("bedroom", "Bedroom", facets.bedrooms, bedroom_label))
    html_parts.append(_multi_select("bathroom", "Bathroom", facets.bathrooms, bathroom_label))
    html_parts.append(_multi_select("property_type", "Property Type", facets.property_types))
    html_parts.append(_multi_select("availability", "Status", facets.availability))
    html_parts.append('<label class="text-sm text-slate-600">Update Status'
                      '<select class="border rounded px-3 py-2 w-full" name="update_availability">'
                      f'<option value="">Any</option>{_options(facets.update_availability)}</select></label>')
    html_parts.append('<input class="border rounded px-3 py-2" type="text" name="tel" placeholder="Tel"/>')
    html_parts.append('<input class="border rounded px-3 py-2" type="number" name="min_price" placeholder="Min price"/>')
    html_parts.append('<input class="border rounded px-3 py-2" type="number" name="max_price" placeholder="Max price"/>')
    html_parts.append('<input class="border rounded px-3 py-2" type="number" name="min_area_size" placeholder="Min floor size"/>')
    html_parts.append('<input class="border rounded px-3 py-2" type="number" name="max_area_size" placeholder="Max floor size"/>')
    html_parts.append('<label class="flex items-center gap-2"><input type="checkbox" name="pet_allowed" value="true"/>Pet Allowed</label>')
    html_parts.append('<label class="flex items-center gap-2"><input type="checkbox" name="exclusive" value="true"/>Exclusive</label>')
    html_parts.append('<div class="md:col-span-4 flex items-center gap-2">'
                      '<button class="px-3 py-2 rounded bg-slate-800 text-white" type="submit">Search</button>'
                      '<button class="px-3 py-2 rounded border" type="reset">Reset</button>'
                      '<a class="px-3 py-2 rounded border" href="/api/export/csv" target="_blank">Export CSV</a>'
                      '</div></form>')
    html_parts.append('<div id="table" hx-get="/ui/table" hx-trigger="load"></div>')
    html_parts.append(PAGE_FOOT)
    return HTMLResponse(''.join(html_parts))


@router.get('/ui/table', response_class=HTMLResponse)
async def ui_table(
    filters: FilterCriteria = Depends(get_listing_filters),
    page: int = 1,
    page_size: int = config.DEFAULT_PAGE_SIZE,
    store: ListingStore = Depends(get_store),
):
    """Generate HTML table with filtered listings."""
    try:
        page_size = min(max(1, page_size), config.MAX_PAGE_SIZE)
        rows = await store.search(filters)
        total = len(rows)
        pages = max(1, (total + page_size - 1) // page_size)
        page = min(max(1, page), pages)
        offset = (page - 1) * page_size

        html_parts = ['<div class="bg-white rounded-xl shadow border">']
        html_parts.append('<table class="min-w-full divide-y divide-slate-200">')
        html_parts.append('<thead class="bg-slate-50"><tr>')

        headers = ["LP Code", "Project", "Post Type", "Property Type", "Bed/Bath", "Size",
                   "Price", "Status", "Updated", "Actions"]
        for header in headers:
            html_parts.append(f'<th class="px-3 py-2 text-left text-xs font-semibold">{header}</th>')

        html_parts.append('</tr></thead><tbody class="divide-y divide-slate-100">')

        for listing in rows[offset:offset + page_size]:
            html_parts.append(_table_row(listing))

        html_parts.append('</tbody></table>')

        # Pagination
        query_string = _criteria_query(filters)
        prev_page = max(1, page - 1)
        next_page = min(pages, page + 1)
        html_parts.append('<div class="flex items-center justify-between p-3 text-sm text-slate-600">')
        html_parts.append(f'<div>Total: {total}</div>')
        html_parts.append('<div class="space-x-2">')
        html_parts.append(f'<a class="px-2 py-1 border rounded" hx-get="/ui/table?page={prev_page}&page_size={page_size}&{escape(query_string)}" hx-target="#table">Prev</a>')
        html_parts.append(f'<span>Page {page}/{pages}</span>')
        html_parts.append(f'<a class="px-2 py-1 border rounded" hx-get="/ui/table?page={next_page}&page_size={page_size}&{escape(query_string)}" hx-target="#table">Next</a>')
        html_parts.append('</div></div></div>')

        return HTMLResponse(''.join(html_parts))

    except Exception as e:
        logger.error(f"Error generating UI table: {e}")
        return HTMLResponse('<div class="text-red-600">Error loading listings</div>')


def _table_row(listing: ListingRecord) -> str:
    sku = escape(listing.sku)
    price = f'{listing.price:,.0f}' if listing.price is not None else '-'
    size = f'{listing.area_size:g}' if listing.area_size is not None else '-'
    rooms = f'{escape(listing.bedroom or "-")} / {escape(listing.bathroom or "-")}'
    flags = []
    if listing.exclusive:
        flags.append('<span class="text-xs bg-amber-100 text-amber-800 px-1 rounded">Exclusive</span>')
    if listing.pet_allowed:
        flags.append('<span class="text-xs bg-emerald-100 text-emerald-800 px-1 rounded">Pets</span>')
    return (
        '<tr>'
        f'<td class="px-3 py-2 font-medium">{sku} {"".join(flags)}</td>'
        f'<td class="px-3 py-2"><div class="max-w-xs truncate">{escape(listing.title_en or "-")}</div>'
        f'<div class="text-xs text-slate-500">{escape(listing.area_lp)}</div></td>'
        f'<td class="px-3 py-2">{escape(listing.post_type)}</td>'
        f'<td class="px-3 py-2">{escape(listing.property_type)}</td>'
        f'<td class="px-3 py-2">{rooms}</td>'
        f'<td class="px-3 py-2">{size}</td>'
        f'<td class="px-3 py-2">{price}</td>'
        f'<td class="px-3 py-2">{escape(listing.availability or "-")}</td>'
        f'<td class="px-3 py-2 text-xs text-slate-500">{format_timestamp(listing.update_availability)}</td>'
        f"<td class='px-3 py-2'><a class='text-blue-600 underline' href='/detail/{sku}'>View</a></td>"
        '</tr>'
    )


@router.get('/detail/{sku}', response_class=HTMLResponse)
async def detail_page(sku: str, store: ListingStore = Depends(get_store)):
    """Detail page with the status form and delete action."""
    try:
        listing = await store.get(sku)
    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Listing not found")
    except ListingsApiError as e:
        logger.error(f"Error generating detail page for {sku}: {e}")
        raise HTTPException(status_code=502, detail="Listings API unavailable")

    facets = await store.facets()
    status_options = sorted(set(facets.availability) | {listing.availability} - {""})
    api_path = f"/api/listings/{listing.post_type}/{listing.sku}"

    html = PAGE_HEAD.format(title=f"{escape(listing.sku)} - Listing Console")
    html += f'''<a href="/" class="text-blue-600 underline">&larr; Back</a>
<h1 class="text-2xl font-semibold mt-2">{escape(listing.sku)} / {escape(listing.post_type)}</h1>
<div class="text-lg mt-1">{escape(listing.title_en or listing.title_th or "-")}</div>'''

    details = [
        ("Area LP", listing.area_lp), ("Area Group", listing.area_lv),
        ("Property Type", listing.property_type), ("Post From", listing.post_from),
        ("Price", f'{listing.price:,.0f}' if listing.price is not None else None),
        ("Area Size", listing.area_size), ("Floor", listing.floor),
        ("Bedroom", listing.bedroom), ("Bathroom", listing.bathroom),
        ("Facing Direction", listing.facing_direction), ("Unit Number", listing.unit_number),
        ("Building Year", listing.building_year), ("Pet Allowed", listing.pet_allowed),
        ("Exclusive", listing.exclusive), ("Listed On", listing.listed_on),
        ("Name", listing.name), ("Tel.", listing.phone), ("Email", listing.email),
        ("Line ID", listing.line_id), ("Whatsapp", listing.whatsapp),
        ("Facebook Messenger", listing.facebook_messenger), ("Wechat", listing.wechat),
        ("External Data Source", listing.external_data_source),
    ]
    html += '<div class="grid grid-cols-1 md:grid-cols-2 gap-4 mt-4">'
    html += '<div class="bg-white rounded-lg shadow p-3"><h3 class="font-medium mb-2">Details</h3><ul class="space-y-1">'
    for label, value in details:
        display_value = value if value not in (None, "") else "-"
        html += f'<li class="flex justify-between"><span>{label}</span><span class="text-slate-700">{escape(str(display_value))}</span></li>'
    html += '</ul></div>'

    refresh_button = ''
    if listing.ps_code is not None:
        refresh_button = '<button type="button" id="refresh" class="px-3 py-2 rounded bg-slate-800 text-white">Refresh</button>'

    html += f'''<form id="status" class="bg-white rounded-lg shadow p-3 space-y-3">
<h3 class="font-medium">Status</h3>
<select name="availability" class="border rounded px-3 py-2 w-full">{_options(status_options, selected=[listing.availability])}</select>
<div class="text-sm">Update Status: {format_timestamp(listing.update_availability)}</div>
<textarea name="comment" rows="6" class="border rounded px-3 py-2 w-full" placeholder="Comments">{escape(listing.comment)}</textarea>
<div class="flex justify-between">{refresh_button}
<div class="space-x-2"><button type="reset" class="px-3 py-2 rounded border">Reset</button>
<button type="submit" class="px-3 py-2 rounded bg-slate-800 text-white">Save</button></div></div>
<div id="message" class="text-sm"></div>
</form></div>
<div class="mt-4"><button id="delete" class="px-3 py-2 rounded border border-red-600 text-red-700">Delete</button></div>
<script>
const apiPath = {json.dumps(api_path)};
const form = document.getElementById('status');
const message = document.getElementById('message');
form.addEventListener('submit', async (e) => {{
  e.preventDefault();
  const body = {{comment: form.comment.value, availability: form.availability.value}};
  const r = await fetch(apiPath, {{method: 'PUT', headers: {{'Content-Type': 'application/json'}}, body: JSON.stringify(body)}});
  message.textContent = r.ok ? 'Comment updated' : 'Error updating comment';
  if (r.ok) {{ form.comment.defaultValue = body.comment; }}
}});
const refresh = document.getElementById('refresh');
if (refresh) refresh.addEventListener('click', async () => {{
  const r = await fetch(apiPath + '/availability');
  if (!r.ok) {{ message.textContent = 'Error fetch Availability'; return; }}
  const d = await r.json();
  if (![...form.availability.options].some(o => o.value === d.availability)) form.availability.add(new Option(d.availability, d.availability));
  form.availability.value = d.availability;
  form.comment.value = d.comment;
  message.textContent = 'Fetch availability';
}});
document.getElementById('delete').addEventListener('click', async () => {{
  if (!confirm('Are you sure you want to delete this property?')) return;
  const r = await fetch(apiPath, {{method: 'DELETE'}});
  if (r.ok) window.location = '/'; else alert('Error delete data');
}});
</script>'''
    html += PAGE_FOOT
    return HTMLResponse(html)


@router.get('/new', response_class=HTMLResponse)
async def new_listing_page(store: ListingStore = Depends(get_store)):
    """Form for adding a property."""
    try:
        facets = await store.facets()
    except ListingsApiError as e:
        logger.error(f"Error loading facets for new listing form: {e}")
        raise HTTPException(status_code=502, detail="Listings API unavailable")

    def datalist(list_id: str, values: List[str]) -> str:
        return f'<datalist id="{list_id}">{_options(values)}</datalist>'

    def text_input(name: str, label: str, list_id: Optional[str] = None, input_type: str = "text",
                   required: bool = False) -> str:
        attrs = f' list="{list_id}"' if list_id else ''
        attrs += ' required' if required else ''
        return (f'<label class="text-sm text-slate-600">{label}'
                f'<input class="border rounded px-3 py-2 w-full" type="{input_type}" name="{name}"{attrs}/></label>')

    def select(name: str, label: str, values: List[str], required: bool = False) -> str:
        req = ' required' if required else ''
        return (f'<label class="text-sm text-slate-600">{label}'
                f'<select class="border rounded px-3 py-2 w-full" name="{name}"{req}>'
                f'<option value=""></option>{_options(values)}</select></label>')

    html = PAGE_HEAD.format(title="Add property - Listing Console")
    html += '<a href="/" class="text-blue-600 underline">&larr; Back</a>'
    html += '<h1 class="text-2xl font-semibold mt-2 mb-4">Add property</h1>'
    html += ''.join([
        datalist("areaLPOptions", facets.area_lp),
        datalist("areaLVOptions", facets.area_lv),
        datalist("projectOptions", facets.project_names),
        datalist("postFromOptions", facets.post_from),
        datalist("availabilityOptions", facets.availability),
    ])
    html += '<form id="create" class="grid grid-cols-1 md:grid-cols-2 gap-3 bg-white p-4 rounded-xl shadow">'
    html += ''.join([
        text_input("areaLP", "Area LP", "areaLPOptions"),
        text_input("areaLV", "Area Group (comma separated)", "areaLVOptions"),
        text_input("sku", "SKU (e.g. AB-12)", required=True),
        select("propertyType", "Property Type", facets.property_types, required=True),
        select("postType", "Post Type", facets.post_types, required=True),
        text_input("postFrom", "Post From", "postFromOptions"),
        text_input("titleEN", "Title EN", "projectOptions"),
        text_input("price", "Price", input_type="number"),
        text_input("areaSize", "Area Size", input_type="number"),
        text_input("floor", "Floor"),
        select("bedroom", "Bedroom", BEDROOM_CHOICES),
        select("bathroom", "Bathroom", BATHROOM_CHOICES),
        select("facingDirection", "Facing Direction", FACING_DIRECTIONS),
        text_input("unitNumber", "Unit Number"),
        text_input("buildingYear", "Building Year", input_type="number"),
        text_input("name", "Name"),
        text_input("email", "Email", input_type="email"),
        text_input("tel", "Tel."),
        text_input("lineId", "Line ID"),
        text_input("whatsapp", "Whatsapp"),
        text_input("facebookMessenger", "Facebook Messenger"),
        text_input("wechat", "Wechat"),
        text_input("availability", "Availability", "availabilityOptions"),
        text_input("listedOn", "Listed On", input_type="date"),
        text_input("externalDataSource", "External Data Source"),
        text_input("comment", "Comment"),
    ])
    html += '''<label class="flex items-center gap-2"><input type="checkbox" name="petAllowed"/>Pet Allowed</label>
<label class="flex items-center gap-2"><input type="checkbox" name="exclusive"/>Exclusive</label>
<div class="md:col-span-2 flex items-center gap-2">
<button type="submit" class="px-3 py-2 rounded bg-slate-800 text-white">Save</button>
<span id="message" class="text-sm"></span></div>
</form>
<script>
const form = document.getElementById('create');
form.addEventListener('submit', async (e) => {
  e.preventDefault();
  const body = {};
  for (const [k, v] of new FormData(form).entries()) { if (v !== '') body[k] = v; }
  body.petAllowed = form.petAllowed.checked ? 'Allow' : '';
  body.exclusive = form.exclusive.checked ? 'Exclusive' : '';
  const r = await fetch('/api/listings', {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body)});
  if (r.ok) { window.location = '/detail/' + encodeURIComponent(body.sku); return; }
  const d = await r.json().catch(() => ({}));
  document.getElementById('message').textContent = d.detail ? JSON.stringify(d.detail) : 'Error saving property';
});
</script>'''
    html += PAGE_FOOT
    return HTMLResponse(html)
