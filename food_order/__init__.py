"""Walk-up food ordering kiosk with a live orders manager."""
