from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..auth import require_user

router = APIRouter()

DASHBOARD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>SafetyFixs - Submissions Dashboard</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap" rel="stylesheet">
    <style>body { font-family: 'Inter', sans-serif; }</style>
</head>
<body class="bg-gray-100 text-gray-800">
<div class="container mx-auto px-4 sm:px-6 lg:px-8 py-12">
    <div class="flex flex-col sm:flex-row justify-between items-start sm:items-center mb-8 gap-4">
        <h1 class="text-3xl font-bold text-gray-900">Submissions Dashboard</h1>
        <div class="flex items-center space-x-4">
            <label class="flex items-center space-x-2">
                <input type="checkbox" id="showAllToggle" class="h-5 w-5 rounded">
                <span>Show All</span>
            </label>
            <button id="refreshBtn" class="bg-amber-500 text-white px-4 py-2 rounded-md hover:bg-amber-600">Refresh</button>
        </div>
    </div>
    <div class="bg-white shadow-lg rounded-lg overflow-x-auto">
        <table class="min-w-full divide-y divide-gray-200">
            <thead class="bg-gray-50">
            <tr>
                <th class="px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase">ID</th>
                <th class="px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase">Shop Name</th>
                <th class="px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase">Vehicle</th>
                <th class="px-6 py-3 text-center text-xs font-medium text-gray-500 uppercase">Done</th>
                <th class="px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase">Done At</th>
                <th class="px-6 py-3 text-center text-xs font-medium text-gray-500 uppercase">Printed</th>
                <th class="px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase">Printed At</th>
                <th class="px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase">Submitted At</th>
            </tr>
            </thead>
            <tbody id="submissionsTableBody" class="bg-white divide-y divide-gray-200"></tbody>
        </table>
    </div>
</div>
<script>
    const tableBody = document.getElementById('submissionsTableBody');
    const refreshBtn = document.getElementById('refreshBtn');
    const showAllToggle = document.getElementById('showAllToggle');

    function esc(v) {
        return String(v).replace(/[&<>"']/g, c => ({'&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;', "'": '&#39;'}[c]));
    }

    function fmt(ts) {
        if (!ts) return 'N/A';
        // submittedAt comes back as "YYYY-MM-DD HH:MM:SS" in UTC
        const iso = ts.includes('T') ? ts : ts.replace(' ', 'T') + 'Z';
        return new Date(iso).toLocaleString();
    }

    async function updateStatus(id, field, value) {
        try {
            const response = await fetch(`/api/submissions/${id}/status`, {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify({[field]: value})
            });
            if (!response.ok) throw new Error('Failed to update status');
            fetchSubmissions();
        } catch (error) {
            console.error('Error updating status:', error);
            alert('Failed to update status. Please try again.');
        }
    }

    async function fetchSubmissions() {
        try {
            const response = await fetch(`/api/submissions?showAll=${showAllToggle.checked}`);
            if (!response.ok) throw new Error('Failed to fetch submissions');
            const submissions = await response.json();
            tableBody.innerHTML = '';
            if (submissions.length === 0) {
                tableBody.innerHTML = '<tr><td colspan="8" class="text-center py-8 text-gray-500">No submissions found.</td></tr>';
                return;
            }
            submissions.forEach(sub => {
                const row = document.createElement('tr');
                const vehicle = sub.vehicleYear
                    ? `${sub.vehicleYear} ${sub.vehicleMake || ''} ${sub.vehicleModel || ''}` : 'N/A';
                row.innerHTML = `
                    <td class="px-6 py-4 text-sm font-medium text-gray-900">${sub.id}</td>
                    <td class="px-6 py-4 text-sm text-gray-700">${esc(sub.shopName || 'N/A')}</td>
                    <td class="px-6 py-4 text-sm text-gray-700">${esc(vehicle)}</td>
                    <td class="px-6 py-4 text-center">
                        <input type="checkbox" class="h-5 w-5 rounded" ${sub.isDone ? 'checked' : ''}
                               onchange="updateStatus(${sub.id}, 'isDone', this.checked)">
                    </td>
                    <td class="px-6 py-4 text-sm text-gray-500">${fmt(sub.doneAt)}</td>
                    <td class="px-6 py-4 text-center">
                        <input type="checkbox" class="h-5 w-5 rounded" ${sub.isPrinted ? 'checked' : ''}
                               onchange="updateStatus(${sub.id}, 'isPrinted', this.checked)">
                    </td>
                    <td class="px-6 py-4 text-sm text-gray-500">${fmt(sub.printedAt)}</td>
                    <td class="px-6 py-4 text-sm text-gray-500">${fmt(sub.submittedAt)}</td>`;
                tableBody.appendChild(row);
            });
        } catch (error) {
            console.error(error);
            tableBody.innerHTML = '<tr><td colspan="8" class="text-center py-8 text-red-500">Error loading submissions.</td></tr>';
        }
    }

    refreshBtn.addEventListener('click', fetchSubmissions);
    showAllToggle.addEventListener('change', fetchSubmissions);
    fetchSubmissions();
</script>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def dashboard_page(user: str = Depends(require_user)):
    return HTMLResponse(DASHBOARD_HTML)
