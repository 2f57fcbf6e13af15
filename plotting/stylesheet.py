import matplotlib
matplotlib.use('Agg')
import numpy as np
from matplotlib import rcParams as rc

Fontsize = 18
rc['figure.figsize'] = (12, 7)
rc['axes.autolimit_mode'] = 'data'
rc['axes.xmargin'] = 0
rc['axes.ymargin'] = 0.10
rc['axes.titlesize'] = Fontsize
rc['axes.labelsize'] = Fontsize
rc['xtick.direction'] = 'in'
rc['ytick.direction'] = 'in'
rc['xtick.labelsize'] = Fontsize
rc['ytick.labelsize'] = Fontsize
rc['axes.grid'] = True
rc['grid.linestyle'] = '-'
rc['grid.alpha'] = 0.2
rc['legend.fontsize'] = int(Fontsize*0.9)
rc['legend.loc'] = 'upper left'
rc['legend.framealpha'] = 0
rc['legend.markerscale'] = 1.5
rc['figure.autolayout'] = True
rc['savefig.dpi'] = 200
rc['lines.markeredgecolor'] = matplotlib.colors.to_rgba('black', 0.5)
rc['lines.markeredgewidth'] = 0.01

def set_fontsizes(fontsize):
  rc['axes.labelsize'] = fontsize
  rc['xtick.labelsize'] = fontsize
  rc['ytick.labelsize'] = fontsize
  rc['legend.fontsize'] = int(fontsize*0.9)

#One marker per dtype: Circle, Triangle, Square, Diamond
Markers = ['o', '^', 's', 'D']
MarkerScales = np.array([1.1, 1.25, 1., 1.])
