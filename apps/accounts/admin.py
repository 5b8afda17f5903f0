from django import forms
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import PacteHistory, User


class UserCreationForm(forms.ModelForm):
    """Formulaire de création d'utilisateur sans champs password1/password2"""
    password = forms.CharField(label='Mot de passe', widget=forms.PasswordInput)

    class Meta:
        model = User
        fields = ('email', 'nom', 'prenom', 'initials', 'role', 'actif', 'in_pacte')

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class UserChangeForm(forms.ModelForm):
    class Meta:
        model = User
        fields = ('email', 'nom', 'prenom', 'initials', 'role', 'actif', 'in_pacte')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    add_form = UserCreationForm
    form = UserChangeForm

    list_display = ('email', 'nom', 'prenom', 'role', 'in_pacte', 'actif', 'date_creation')
    list_filter = ('role', 'actif', 'in_pacte')
    search_fields = ('email', 'nom', 'prenom')
    ordering = ('nom', 'prenom')
    readonly_fields = ('date_creation', 'last_login')

    fieldsets = (
        (None, {'fields': ('email',)}),
        (_('Informations personnelles'), {'fields': ('nom', 'prenom', 'initials')}),
        (_('Rôle et statut'), {'fields': ('role', 'actif', 'in_pacte')}),
        (_('Dates importantes'), {'fields': ('date_creation', 'last_login')}),
    )

    def get_fieldsets(self, request, obj=None):
        if obj is None:
            return ((None, {'fields': ('email', 'nom', 'prenom', 'initials', 'password', 'role', 'actif', 'in_pacte')}),)
        return super().get_fieldsets(request, obj)

    def get_form(self, request, obj=None, **kwargs):
        """Adapte le formulaire selon si on crée ou modifie"""
        defaults = {}
        if obj is None:
            defaults['form'] = self.add_form
        defaults.update(kwargs)
        return super().get_form(request, obj, **defaults)


@admin.register(PacteHistory)
class PacteHistoryAdmin(admin.ModelAdmin):
    list_display = ('teacher_name', 'previous_status', 'new_status', 'school_year', 'changed_by', 'created_at')
    list_filter = ('school_year', 'new_status')
    readonly_fields = ('teacher', 'teacher_name', 'previous_status', 'new_status',
                       'reason', 'school_year', 'changed_by', 'created_at')

    def has_delete_permission(self, request, obj=None):
        return False
