from django.db import models


class ServiceableArea(models.Model):
    """Pincode we deliver to"""
    pincode = models.CharField(max_length=6, unique=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.pincode} - {self.city}"

    class Meta:
        db_table = 'serviceable_areas'
        ordering = ['pincode']
