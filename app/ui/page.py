from __future__ import annotations

import json

from app.menu.models import ALLERGEN_KEYS


def render_menu_page(api_base: str = "/api") -> str:
    allergens = [{"id": key, "label": key.capitalize()} for key in ALLERGEN_KEYS]
    return (
        _PAGE_TEMPLATE.replace("__API_BASE__", json.dumps(api_base))
        .replace("__ALLERGENS__", json.dumps(allergens))
    )


_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>Menu Allergens</title>
  <style>
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Arial;
      background: #f6f7f9;
      color: #1a1f2b;
    }
    main { max-width: 56rem; margin: 0 auto; padding: 24px; }
    .card {
      background: #fff;
      border: 1px solid #e3e6ea;
      border-radius: 12px;
      padding: 20px;
      margin-bottom: 16px;
    }
    h1 { font-size: 20px; margin: 0 0 16px; }
    h3 { margin: 0 0 4px; font-size: 17px; }
    label { display: block; font-size: 13px; font-weight: 600; margin: 12px 0 6px; }
    input[type=text], input[type=number] {
      width: 100%;
      padding: 9px 11px;
      border: 1px solid #cfd5dc;
      border-radius: 8px;
      font-size: 14px;
    }
    .allergen-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 8px; }
    .allergen-grid label { display: flex; gap: 8px; font-weight: 400; margin: 0; }
    .actions { display: flex; gap: 8px; margin-top: 16px; }
    button {
      padding: 9px 14px;
      border-radius: 8px;
      border: none;
      background: #1a1f2b;
      color: #fff;
      font-weight: 600;
      cursor: pointer;
    }
    button.ghost { background: transparent; color: #1a1f2b; border: 1px solid #cfd5dc; }
    button.primary { flex: 1; }
    .status {
      display: none;
      justify-content: space-between;
      align-items: center;
      padding: 10px 14px;
      border-radius: 8px;
      margin-bottom: 16px;
      background: #eef4ff;
      border: 1px solid #c9d8f5;
    }
    .status.error { background: #fff0f1; border-color: #f5c2c7; }
    .row { display: flex; justify-content: space-between; align-items: flex-start; gap: 12px; }
    .muted { color: #5b6673; margin: 2px 0; }
    .price { font-weight: 600; margin: 4px 0; }
    .tags { display: flex; flex-wrap: wrap; gap: 6px; margin-top: 6px; }
    .tag {
      padding: 3px 9px;
      border-radius: 999px;
      background: #fde2e2;
      color: #8a1c1c;
      font-size: 13px;
    }
  </style>
</head>
<body>
  <main>
    <section class="card">
      <h1 id="form-title">Add New Menu Item</h1>
      <label for="name">Item Name *</label>
      <input id="name" name="name" type="text" placeholder="Enter item name" />
      <label for="description">Description</label>
      <input id="description" name="description" type="text" placeholder="Enter item description" />
      <label for="price">Price *</label>
      <input id="price" name="price" type="number" min="0" step="0.01" placeholder="Enter price" />
      <label>Allergens</label>
      <div class="allergen-grid" id="allergens"></div>
      <div class="actions">
        <button class="primary" id="submit">Add Item</button>
        <button class="ghost" id="cancel" style="display:none">Cancel</button>
      </div>
    </section>

    <div class="status" id="status">
      <span id="status-text"></span>
      <button class="ghost" id="dismiss">Dismiss</button>
    </div>

    <section id="items"><p class="muted">Loading...</p></section>
  </main>

  <script>
    const API_BASE = __API_BASE__;
    const ALLERGENS = __ALLERGENS__;

    const emptyDraft = () => ({
      name: '',
      description: '',
      price: '',
      allergens: Object.fromEntries(ALLERGENS.map(a => [a.id, false])),
    });

    const state = { items: [], draft: emptyDraft(), editingId: null };

    const $ = (id) => document.getElementById(id);

    function showStatus(text, isError) {
      const box = $('status');
      $('status-text').textContent = text;
      box.classList.toggle('error', Boolean(isError));
      box.style.display = 'flex';
    }

    function dismissStatus() {
      $('status').style.display = 'none';
      $('status-text').textContent = '';
    }

    function renderAllergenInputs() {
      $('allergens').innerHTML = '';
      ALLERGENS.forEach(a => {
        const label = document.createElement('label');
        const box = document.createElement('input');
        box.type = 'checkbox';
        box.id = `allergen-${a.id}`;
        box.checked = Boolean(state.draft.allergens[a.id]);
        box.addEventListener('change', () => {
          state.draft.allergens[a.id] = !state.draft.allergens[a.id];
        });
        label.appendChild(box);
        label.appendChild(document.createTextNode(a.label));
        $('allergens').appendChild(label);
      });
    }

    function renderForm() {
      const editing = state.editingId !== null;
      $('form-title').textContent = editing ? 'Edit Menu Item' : 'Add New Menu Item';
      $('submit').textContent = editing ? 'Update Item' : 'Add Item';
      $('cancel').style.display = editing ? 'inline-block' : 'none';
      $('name').value = state.draft.name;
      $('description').value = state.draft.description || '';
      $('price').value = state.draft.price;
      renderAllergenInputs();
    }

    function renderItems() {
      const list = $('items');
      list.innerHTML = '';
      state.items.forEach(item => {
        const card = document.createElement('div');
        card.className = 'card row';

        const body = document.createElement('div');
        const title = document.createElement('h3');
        title.textContent = item.name;
        const description = document.createElement('p');
        description.className = 'muted';
        description.textContent = item.description || '';
        const price = document.createElement('p');
        price.className = 'price';
        price.textContent = `$${item.price}`;
        const tags = document.createElement('div');
        tags.className = 'tags';
        Object.entries(item.allergens || {})
          .filter(([, present]) => present)
          .forEach(([key]) => {
            const tag = document.createElement('span');
            tag.className = 'tag';
            tag.textContent = key.charAt(0).toUpperCase() + key.slice(1);
            tags.appendChild(tag);
          });
        body.append(title, description, price, tags);

        const buttons = document.createElement('div');
        buttons.className = 'actions';
        const edit = document.createElement('button');
        edit.className = 'ghost';
        edit.textContent = 'Edit';
        edit.addEventListener('click', () => startEdit(item.id));
        const remove = document.createElement('button');
        remove.className = 'ghost';
        remove.textContent = 'Delete';
        remove.addEventListener('click', () => deleteItem(item.id));
        buttons.append(edit, remove);

        card.append(body, buttons);
        list.appendChild(card);
      });
    }

    async function request(path, options) {
      const response = await fetch(`${API_BASE}${path}`, {
        headers: { 'Content-Type': 'application/json' },
        ...options,
      });
      if (!response.ok) throw new Error(`Request failed with ${response.status}`);
      return response.json();
    }

    async function fetchItems() {
      try {
        state.items = await request('/menu-items');
        renderItems();
        return true;
      } catch (err) {
        showStatus('Failed to load menu items', true);
        console.error('Error:', err);
        return false;
      }
    }

    function resetForm() {
      state.draft = emptyDraft();
      state.editingId = null;
      renderForm();
    }

    function startEdit(id) {
      const item = state.items.find(i => i.id === id);
      if (!item) return;
      state.draft = {
        name: item.name,
        description: item.description || '',
        price: String(item.price),
        allergens: { ...emptyDraft().allergens, ...item.allergens },
      };
      state.editingId = id;
      renderForm();
    }

    async function submit() {
      state.draft.name = $('name').value;
      state.draft.description = $('description').value;
      state.draft.price = $('price').value;
      if (!state.draft.name.trim() || !String(state.draft.price).trim()) {
        showStatus('Please fill in all required fields', false);
        return;
      }
      const editing = state.editingId !== null;
      const body = JSON.stringify({ ...state.draft, price: parseFloat(state.draft.price) });
      try {
        if (editing) {
          await request(`/menu-items/${state.editingId}`, { method: 'PUT', body });
        } else {
          await request('/menu-items', { method: 'POST', body });
        }
      } catch (err) {
        showStatus(editing ? 'Failed to update item' : 'Failed to add item', true);
        console.error('Error:', err);
        return;
      }
      resetForm();
      if (await fetchItems()) {
        showStatus(editing ? 'Item updated successfully' : 'Item added successfully', false);
      }
    }

    async function deleteItem(id) {
      try {
        await request(`/menu-items/${id}`, { method: 'DELETE' });
      } catch (err) {
        showStatus('Failed to delete item', true);
        console.error('Error:', err);
        return;
      }
      if (state.editingId === id) resetForm();
      if (await fetchItems()) showStatus('Item deleted successfully', false);
    }

    $('submit').addEventListener('click', submit);
    $('cancel').addEventListener('click', resetForm);
    $('dismiss').addEventListener('click', dismissStatus);

    renderForm();
    fetchItems();
  </script>
</body>
</html>
"""
