"""Campus Attendance package.

Staff sign in/out gated on geofence presence and an image capture, organized
by feature modules (geofence, attendance, capture, reports, ...) with a thin
Flask controller layer over service/repository layers.
"""
