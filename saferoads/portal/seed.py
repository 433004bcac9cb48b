from saferoads.portal.state import PortalReport, PortalState, Project

SEED_REPORTS = [
    {"id": 1, "type": "Pothole", "location": "Main Street, Junction 5", "severity": 85,
     "status": "Priority", "date": "2026-01-06", "lat": 22.5726, "lng": 88.3639},
    {"id": 2, "type": "Road Crack", "location": "Highway 12, KM 45", "severity": 68,
     "status": "Pending", "date": "2026-01-05", "lat": 22.5800, "lng": 88.3700},
    {"id": 3, "type": "Flooding Area", "location": "River Road, Bridge Area", "severity": 92,
     "status": "Priority", "date": "2026-01-04", "lat": 22.5650, "lng": 88.3580},
    {"id": 4, "type": "AI Detected", "location": "Park Street Crossing", "severity": 78,
     "status": "Priority", "date": "2026-01-06", "lat": 22.5750, "lng": 88.3620},
]

SEED_PROJECTS = [
    {"id": 1, "name": "Highway 12 Resurfacing Project", "budget": 2500000,
     "contractor": "BuildRight Infrastructure Ltd.", "materials": 1500000, "labor": 1000000,
     "progress": 65, "completion": "2026-03-15", "area": "North District", "status": "In Progress"},
    {"id": 2, "name": "Main Street Bridge Repair", "budget": 5000000,
     "contractor": "Elite Construction Co.", "materials": 3200000, "labor": 1800000,
     "progress": 40, "completion": "2026-06-30", "area": "Central District", "status": "In Progress"},
    {"id": 3, "name": "Park Avenue Expansion", "budget": 3800000,
     "contractor": "MetroBuild Solutions", "materials": 2300000, "labor": 1500000,
     "progress": 25, "completion": "2026-08-20", "area": "South District", "status": "In Progress"},
    {"id": 4, "name": "River Road Flood Prevention", "budget": 4200000,
     "contractor": "AquaSafe Engineering", "materials": 2800000, "labor": 1400000,
     "progress": 80, "completion": "2026-02-28", "area": "West District", "status": "Near Completion"},
]


def seed_state(state: PortalState) -> PortalState:
    if state.reports or state.projects:
        return state

    state.reports = [PortalReport(**r) for r in SEED_REPORTS]
    state.projects = [Project(**p) for p in SEED_PROJECTS]
    return state
